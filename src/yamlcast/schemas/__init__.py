"""Schema strategies for scalar typing and canonical emission.

A schema decides how scalar text is typed when parsing and how native
values are rendered when emitting. Built-in schemas cover YAML 1.1, the
YAML 1.2 Core schema and the YAML 1.2 JSON schema; `CustomSchema`
overrides selected operations of any of them.
"""

from .base import Schema
from .custom import CustomSchema, HookSource, resolve_hook
from .registry import DEFAULT_SCHEMA, SCHEMAS, get_schema, new_schema
from .resolver import ResolvingSchema
from .yaml11 import Yaml11Schema
from .yaml12 import Yaml12Schema
from .yaml12json import Yaml12JsonSchema

__all__ = (
    'DEFAULT_SCHEMA',
    'SCHEMAS',
    'CustomSchema',
    'HookSource',
    'ResolvingSchema',
    'Schema',
    'Yaml11Schema',
    'Yaml12JsonSchema',
    'Yaml12Schema',
    'get_schema',
    'new_schema',
    'resolve_hook',
)
