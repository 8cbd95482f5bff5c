"""URI builder for FishEye/Crucible REST resources.

Collects path segments and multi-valued query parameters and renders them
into a percent-encoded URL string.
"""

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypeVar, Union
from urllib.parse import quote

# encodeURIComponent-compatible sets: segments may not keep "/", query
# values keep "," so joined lists stay readable (t=git,svn).
SEGMENT_SAFE_CHARS = "!~*'()"
QUERY_SAFE_CHARS = "!~*'(),:@$;/"

JOIN = "join"
REPEAT = "repeat"

ParameterObject = Union[Mapping[str, Any], Any]
UriT = TypeVar("UriT", bound="Uri")


def stringify_parameter(value: Any) -> str:
    """Render a query parameter value the way the REST services expect it.

    Booleans become ``true``/``false`` and datetimes become epoch
    milliseconds; everything else goes through ``str()``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(int(value.timestamp() * 1000))
    if isinstance(value, Enum):
        return stringify_parameter(value.value)
    return str(value)


def split_segment(segment: str) -> List[str]:
    """Split a segment on "/" and drop empty fragments."""
    return [part for part in str(segment).split("/") if part]


class Uri:
    """Ordered path segments plus query parameters on top of a fixed base.

    Segments are stored unencoded and percent-encoded when rendered. Values
    for one parameter key keep their insertion order, and keys render in
    the order they were first set.

    Args:
        base: Host part of the URL (e.g. ``https://crucible.example.com``)
        *segments: Initial path segments
    """

    def __init__(self, base: str, *segments: str):
        self._base = base
        self._segments: List[str] = []
        self._parameters: Dict[str, List[str]] = {}
        for segment in segments:
            self.add_segment(segment)

    @property
    def base(self) -> str:
        return self._base

    @property
    def segments(self) -> List[str]:
        return list(self._segments)

    @property
    def parameters(self) -> Dict[str, List[str]]:
        return {key: list(values) for key, values in self._parameters.items()}

    def add_segment(self: UriT, segment: Optional[str]) -> UriT:
        """Append a path segment.

        Embedded slashes split the segment, so ``add_segment("/a/b/")`` is
        the same as ``add_segment("a")`` followed by ``add_segment("b")``.
        ``None`` and empty strings add nothing.
        """
        if segment is not None:
            self._segments.extend(split_segment(segment))
        return self

    def set_parameter(self: UriT, key: str, value: Any) -> UriT:
        """Append a single value for ``key``; ``None`` is ignored."""
        if value is not None:
            self.set_parameters_from_array(key, [value])
        return self

    def set_parameters_from_array(
        self: UriT, key: str, values: Optional[Iterable[Any]], mode: str = REPEAT
    ) -> UriT:
        """Append several values for ``key``.

        Args:
            key: Parameter name
            values: Values to add; ``None`` or an empty sequence is a no-op,
                a bare string counts as one value
            mode: ``"repeat"`` renders ``key=a&key=b``, ``"join"`` renders
                ``key=a,b``

        Raises:
            ValueError: If ``mode`` is unknown
        """
        if mode not in (REPEAT, JOIN):
            raise ValueError(f"Unknown parameter mode: {mode}")
        if values is None:
            return self
        if isinstance(values, str):
            values = [values]

        rendered = [stringify_parameter(v) for v in values if v is not None]
        if not rendered:
            return self

        if mode == JOIN:
            rendered = [",".join(rendered)]
        self._parameters.setdefault(key, []).extend(rendered)
        return self

    def set_parameters_from_object(
        self: UriT, parameters: Optional[ParameterObject], mode: str = REPEAT
    ) -> UriT:
        """Add every present property of a mapping or dataclass instance.

        ``None`` values are skipped entirely. List and tuple values are
        forwarded to :meth:`set_parameters_from_array`, everything else to
        :meth:`set_parameter`. A dataclass field can rename its query key
        with ``metadata={"param": "wireName"}``.
        """
        if parameters is None:
            return self

        for key, value in _iter_parameter_items(parameters):
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                self.set_parameters_from_array(key, value, mode)
            else:
                self.set_parameter(key, value)
        return self

    def to_string(self) -> str:
        parts = [quote(segment, safe=SEGMENT_SAFE_CHARS) for segment in self._segments]
        url = "/".join([self._base] + parts)

        query = [
            f"{quote(key, safe=QUERY_SAFE_CHARS)}={quote(value, safe=QUERY_SAFE_CHARS)}"
            for key, values in self._parameters.items()
            for value in values
        ]
        if query:
            url += "?" + "&".join(query)
        return url

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()!r})"


def _iter_parameter_items(parameters: ParameterObject):
    if dataclasses.is_dataclass(parameters) and not isinstance(parameters, type):
        for field in dataclasses.fields(parameters):
            yield field.metadata.get("param", field.name), getattr(
                parameters, field.name
            )
    elif isinstance(parameters, Mapping):
        yield from parameters.items()
    else:
        raise TypeError(
            f"Unsupported parameter object type: {type(parameters).__name__}"
        )
