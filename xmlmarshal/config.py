"""Marshalling settings: constructor kwargs, env vars and code defaults.

Priority chain (highest to lowest):
  1. Init kwargs  (``MarshalSettings(indent="  ")``)
  2. Env vars     (``XMLMARSHAL_*`` prefix, e.g. ``XMLMARSHAL_ENCODING``)
  3. Code defaults baked into the fields below
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MarshalSettings(BaseSettings):
    """Writer configuration shared by every marshal call of one Marshaller.

    Attributes:
        formatted_output: Indent the string output.
        encoding: Encoding named in the XML declaration of string output.
        indent: Indentation unit used when ``formatted_output`` is on.
        newline: Line separator used when ``formatted_output`` is on.
        namespace_prefix: Prefix bound to the root element namespace.
        short_empty_elements: Write empty elements as ``<tag/>``.
        cache_contexts: Memoize binding contexts per type in the default
            provider.
    """

    model_config = SettingsConfigDict(env_prefix="XMLMARSHAL_", frozen=True)

    formatted_output: bool = True
    encoding: str = "UTF-8"
    indent: str = "    "
    newline: str = "\n"
    namespace_prefix: str = Field(default="ns0", min_length=1)
    short_empty_elements: bool = False
    cache_contexts: bool = False
