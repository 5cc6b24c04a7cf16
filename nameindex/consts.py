# Longest query prefix accepted by PrefixIndex.query
DEFAULT_MAX_PREFIX_LENGTH = 100

# Separator between surname, given name and patronymic in the canonical form
NAME_PART_SEPARATOR = " "
