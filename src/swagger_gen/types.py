"""Sized value types for annotating models.

Python's own ``int``/``float``/``bytes`` do not say how wide a value is on
the wire. These markers let a model declare it, so the generated schema
carries the matching ``format``.
"""

from typing import NewType

Int16 = NewType("Int16", int)
UInt16 = NewType("UInt16", int)
Int32 = NewType("Int32", int)
UInt32 = NewType("UInt32", int)
Int64 = NewType("Int64", int)
UInt64 = NewType("UInt64", int)
Byte = NewType("Byte", int)
SByte = NewType("SByte", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)
SByteArray = NewType("SByteArray", bytes)
