"""Request option records and their merge rules.

Options are layered: client defaults, then chat session options, then the
options of a single call. A later layer overrides an earlier one field by
field; a field left as None in a later layer keeps the earlier value.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx
from google.genai import types

from .constants import DEFAULT_API_VERSION, DEFAULT_MODEL

GenerationConfig = Union[types.GenerateContentConfig, Mapping[str, Any]]


@dataclass
class ClientOptions:
    """Options fixed when a GeminiClient is created.

    Attributes:
        api_version: API version for generate calls and Files API endpoints.
        transport: Optional httpx transport shared by all HTTP traffic.
        upload_cache_file: Optional JSON file for the upload cache.
        poll_timeout: Optional limit in seconds for Files API status polling.
    """

    api_version: str = DEFAULT_API_VERSION
    transport: Optional[httpx.BaseTransport] = None
    upload_cache_file: Optional[str] = None
    poll_timeout: Optional[float] = None


@dataclass
class AskOptions:
    """Per-request options. None means "not set at this layer"."""

    model: Optional[str] = None
    history: Optional[List[types.Content]] = None
    generation_config: Optional[GenerationConfig] = None
    safety_settings: Optional[List[types.SafetySetting]] = None
    system_instruction: Optional[types.ContentUnion] = None
    tools: Optional[List[types.Tool]] = None


OptionsLayer = Union[AskOptions, Mapping[str, Any], None]

_ASK_OPTION_FIELDS = frozenset(f.name for f in fields(AskOptions))


def to_ask_options(layer: OptionsLayer) -> AskOptions:
    """Coerce a layer given as a mapping into AskOptions.

    Raises:
        TypeError: If a mapping contains keys that are not AskOptions fields.
    """
    if layer is None:
        return AskOptions()
    if isinstance(layer, AskOptions):
        return layer
    unknown = set(layer) - _ASK_OPTION_FIELDS
    if unknown:
        raise TypeError(f"Unknown ask options: {', '.join(sorted(unknown))}")
    return AskOptions(**layer)


def merge_options(*layers: OptionsLayer) -> AskOptions:
    """Merge option layers, later layers taking precedence.

    Args:
        *layers: AskOptions, mappings of AskOptions fields, or None, ordered
            from lowest to highest precedence.

    Returns:
        A new AskOptions; the inputs are not modified.

    Example:
        >>> merged = merge_options(
        ...     AskOptions(model="gemini-2.5-flash", tools=[]),
        ...     {"model": "gemini-2.5-pro"},
        ... )
        >>> merged.model
        'gemini-2.5-pro'
    """
    merged = AskOptions()
    for layer in layers:
        overrides = {
            name: value
            for name, value in vars(to_ask_options(layer)).items()
            if value is not None
        }
        merged = replace(merged, **overrides)
    return merged


def build_generate_config(
    options: AskOptions,
) -> Optional[types.GenerateContentConfig]:
    """Build the GenerateContentConfig for a request.

    Returns:
        The config, or None if no generation option is set.
    """
    config: Dict[str, Any] = {}

    generation_config = options.generation_config
    if isinstance(generation_config, types.GenerateContentConfig):
        config.update(generation_config.model_dump(exclude_none=True))
    elif generation_config:
        config.update(generation_config)

    if options.safety_settings is not None:
        config["safety_settings"] = options.safety_settings
    if options.system_instruction is not None:
        config["system_instruction"] = options.system_instruction
    if options.tools is not None:
        config["tools"] = options.tools

    if not config:
        return None
    return types.GenerateContentConfig(**config)


def resolve_model(options: AskOptions) -> str:
    """Return the model to use, falling back to DEFAULT_MODEL."""
    return options.model or DEFAULT_MODEL
