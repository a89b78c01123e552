"""Generic loader for descriptor-declared engines.

A descriptor maps an implementation identifier (``"package.module:ClassName"``)
to a comma-separated list of keys. Descriptors are read, in order, from the
packaged ``bakehouse/descriptors/<namespace>.toml`` resource, from installed
entry points in the ``bakehouse.<namespace>`` group (entry point name = key
list), and from any extra descriptor files handed to the loader. Later
registrations win; every collision is logged.
"""

from __future__ import annotations

import importlib
import logging
import tomllib
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from importlib import resources
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DESCRIPTOR_PACKAGE = "bakehouse.descriptors"
ENTRY_POINT_PREFIX = "bakehouse."


@dataclass(frozen=True, slots=True)
class EngineUnavailable:
    """Why an implementation could not be registered."""

    identifier: str
    keys: tuple[str, ...]
    error: Exception


@dataclass(frozen=True, slots=True)
class _Descriptor:
    identifier: str
    keys: tuple[str, ...]
    loader: Callable[[], Any]


def _split_keys(value: str) -> tuple[str, ...]:
    return tuple(key.strip() for key in value.split(",") if key.strip())


def _import_object(identifier: str) -> Any:
    module_name, _, attribute = identifier.partition(":")
    if not attribute:
        module_name, _, attribute = identifier.rpartition(".")
    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attribute.split("."):
        obj = getattr(obj, part)
    return obj


def read_descriptor_file(path: Path) -> dict[str, str]:
    """Read a TOML descriptor file into ``{identifier: "key1,key2"}``."""
    with path.open("rb") as f:
        data = tomllib.load(f)
    return dict(data.get("engines", {}))


def _packaged_descriptor(namespace: str) -> dict[str, str]:
    resource = resources.files(DESCRIPTOR_PACKAGE).joinpath(f"{namespace}.toml")
    if not resource.is_file():
        return {}
    with resource.open("rb") as f:
        data = tomllib.load(f)
    return dict(data.get("engines", {}))


class DescriptorEngineLoader(Generic[T]):
    """Registry of engines keyed by name or file extension.

    Subclasses decide what happens to implementations that cannot be loaded by
    overriding :meth:`on_unavailable`; the default skips them.
    """

    namespace: str = ""

    def __init__(
        self,
        namespace: str | None = None,
        *,
        factory: Callable[[Any], T] | None = None,
        extra_descriptors: Iterable[Path] = (),
    ) -> None:
        if namespace is not None:
            self.namespace = namespace
        if not self.namespace:
            msg = "DescriptorEngineLoader requires a namespace"
            raise ValueError(msg)
        self._factory = factory or (lambda cls: cls())
        self._extra_descriptors = [Path(path) for path in extra_descriptors]
        self._engines: dict[str, T] = {}
        self._unavailable: list[EngineUnavailable] = []
        self._loaded = False

    # -- discovery ---------------------------------------------------------

    def _descriptors(self) -> Iterator[_Descriptor]:
        for identifier, keys in _packaged_descriptor(self.namespace).items():
            yield _Descriptor(identifier, _split_keys(keys), lambda i=identifier: _import_object(i))

        for ep in entry_points(group=f"{ENTRY_POINT_PREFIX}{self.namespace}"):
            yield _Descriptor(ep.value, _split_keys(ep.name), ep.load)

        for path in self._extra_descriptors:
            for identifier, keys in read_descriptor_file(path).items():
                yield _Descriptor(identifier, _split_keys(keys), lambda i=identifier: _import_object(i))

    def load(self) -> None:
        """Process every descriptor and register what can be constructed."""
        for descriptor in self._descriptors():
            try:
                implementation = descriptor.loader()
                engine = self._factory(implementation)
            except (ImportError, AttributeError, TypeError) as exc:
                unavailable = EngineUnavailable(descriptor.identifier, descriptor.keys, exc)
                self._unavailable.append(unavailable)
                logger.debug("Unable to load %s %s: %s", self.namespace, descriptor.identifier, exc)
                self.on_unavailable(unavailable)
                continue
            for key in descriptor.keys:
                self.register(key, engine)
        self._loaded = True

    def on_unavailable(self, unavailable: EngineUnavailable) -> None:
        """Handle an implementation that could not be loaded. Skips it by default."""

    # -- registry API --------------------------------------------------------

    def register(self, key: str, engine: T) -> None:
        previous = self._engines.get(key)
        if previous is not None:
            logger.warning(
                "Registering %s for key '%s' overrides %s",
                _describe(engine),
                key,
                _describe(previous),
            )
        self._engines[key] = engine

    def ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def reset(self) -> None:
        """Clear every registration and reload from descriptors."""
        self._engines.clear()
        self._unavailable.clear()
        self._loaded = False
        self.load()

    def supports_extension(self, key: str) -> bool:
        self.ensure_loaded()
        return key in self._engines

    def get(self, key: str) -> T | None:
        self.ensure_loaded()
        return self._engines.get(key)

    def keys(self) -> set[str]:
        self.ensure_loaded()
        return set(self._engines)

    def items(self) -> list[tuple[str, T]]:
        self.ensure_loaded()
        return list(self._engines.items())

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def unavailable(self) -> list[EngineUnavailable]:
        return list(self._unavailable)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.supports_extension(key)

    def __len__(self) -> int:
        self.ensure_loaded()
        return len(self._engines)


def _describe(engine: object) -> str:
    cls = engine if isinstance(engine, type) else type(engine)
    return f"{cls.__module__}.{cls.__qualname__}"
