#!/usr/bin/env python3
"""
Container and scalar types shared by the model and the loaders.
"""

from typing import Dict, List, NewType, Union, Generic, TypeVar

_Item = TypeVar('_Item')
_Key = TypeVar('_Key')
_Value = TypeVar('_Value')


# ---------- Model containers ----------
class TypedList(List[_Item], Generic[_Item]):
    """Ordered id list of a container (model root or package)."""


class TypedDict(Dict[_Key, _Value], Generic[_Key, _Value]):
    """Element arena keyed by element id."""


# ---------- Scalars ----------
XmlValue = Union[str, int, float, bool, None]      # raw attribute value from XMI or a document
HashString = NewType('HashString', str)            # generated element id
