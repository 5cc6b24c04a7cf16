from nameindex.records import InvalidArgument, NameRecord, canonicalize
from nameindex.prefix_index import IndexInfo, PrefixIndex, PrefixIndexConfig, build_index

__all__ = [
    "InvalidArgument",
    "NameRecord",
    "canonicalize",
    "IndexInfo",
    "PrefixIndex",
    "PrefixIndexConfig",
    "build_index",
]
