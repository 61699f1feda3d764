"""Suite registry: where suites are declared during setup and looked up to run."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional

from loguru import logger

from .config_loader import ConfigLoader
from .oauth import DEFAULT_TIMEOUT
from .suite import Suite


class SuiteRegistry:
    """
    Mapping of suite name to Suite.

    The driver owns one registry: it is filled while suites are declared and
    read when they run. Declaring and running are expected to happen on a
    single thread, one after the other; nothing here is locked.

    Usage:
        >>> registry = SuiteRegistry(ConfigLoader())
        >>> registry.register("users").add_test("list", list_users)
        >>> registry.run_all()
    """

    def __init__(self, config: Optional[ConfigLoader] = None) -> None:
        """
        Args:
            config: When given, new suites pick up ``api.base_url`` and
                    ``api.timeout`` from it
        """
        self.config = config
        self._suites: Dict[str, Suite] = {}

    def register(self, name: str, **options: Any) -> Suite:
        """
        Create a suite and store it under ``name``.

        Registering a name again replaces the earlier suite.

        Args:
            name: Suite name
            **options: Passed to :class:`Suite` (``timeout``, ``transport``)
        """
        if self.config is not None:
            options.setdefault("timeout", float(self.config.get("api.timeout", DEFAULT_TIMEOUT)))

        suite = Suite(name, **options)

        if self.config is not None:
            base_url = self.config.get("api.base_url")
            if base_url:
                suite.set_base_url(base_url)

        if name in self._suites:
            logger.debug(f"Suite '{name}' redefined, replacing earlier registration")
            del self._suites[name]
        self._suites[name] = suite
        return suite

    def get(self, name: str) -> Suite:
        """Return the suite registered under ``name``."""
        try:
            return self._suites[name]
        except KeyError:
            raise KeyError(f"Unknown suite: {name}") from None

    def names(self) -> List[str]:
        return list(self._suites)

    def __contains__(self, name: object) -> bool:
        return name in self._suites

    def __len__(self) -> int:
        return len(self._suites)

    def __iter__(self) -> Iterator[Suite]:
        return iter(list(self._suites.values()))

    def run_all(self, names: Optional[Iterable[str]] = None) -> bool:
        """
        Run suites one after another.

        A failing suite does not stop the ones after it.

        Args:
            names: Suites to run, in this order. All suites when None.

        Returns:
            True when no suite failed

        Raises:
            KeyError: If a requested suite is not registered
        """
        selected = [self.get(name) for name in names] if names is not None else list(self)

        failed = [suite.name for suite in selected if not suite.run()]
        if failed:
            logger.error(f"{len(failed)}/{len(selected)} suite(s) failed: {', '.join(failed)}")
        else:
            logger.info(f"All {len(selected)} suite(s) passed")
        return not failed


__all__ = ["SuiteRegistry"]
