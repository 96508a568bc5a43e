"""
Validation of add and match requests arriving from the transport layer.
"""

from .requests import pair_names, parse_name_list, split_name_field

__all__ = ['pair_names', 'parse_name_list', 'split_name_field']
