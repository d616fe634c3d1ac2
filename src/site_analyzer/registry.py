# src/site_analyzer/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Optional, Set

from .core import AnalyzerDefinition

logger = logging.getLogger(__name__)


class AnalyzerRegistry:
    """
    Central registry for analyzers.

    Dynamically discovers AnalyzerDefinition objects from the modules of the
    'site_analyzer.analyzers' package and keeps them in run order.
    """

    _definitions: Dict[str, AnalyzerDefinition] = {}
    _all_codes: Set[str] = set()
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Registers every module of `site_analyzer.analyzers` exposing a
        `DEFINITION` attribute (instance of `AnalyzerDefinition`).
        """
        if cls._loaded:
            return

        try:
            import site_analyzer.analyzers as analyzers_pkg

            for _, name, _ in pkgutil.iter_modules(analyzers_pkg.__path__):
                full_name = f"site_analyzer.analyzers.{name}"
                try:
                    module = importlib.import_module(full_name)
                except Exception as e:
                    logger.error(f"Error loading analyzer module {name}: {e}")
                    continue

                defn = getattr(module, "DEFINITION", None)
                if isinstance(defn, AnalyzerDefinition):
                    cls.register(defn)

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find analyzers package: {e}")

    @classmethod
    def register(cls, defn: AnalyzerDefinition) -> None:
        cls._definitions[defn.key] = defn
        cls._all_codes.update(defn.codes)
        logger.debug(f"Analyzer loaded: {defn.key}")

    @classmethod
    def get(cls, key: str) -> Optional[AnalyzerDefinition]:
        cls.discover()
        return cls._definitions.get(key)

    @classmethod
    def get_all(cls) -> List[AnalyzerDefinition]:
        """All definitions in their fixed run order."""
        cls.discover()
        return sorted(cls._definitions.values(), key=lambda d: (d.order, d.key))

    @classmethod
    def keys(cls) -> List[str]:
        return [d.key for d in cls.get_all()]

    @classmethod
    def get_all_possible_codes(cls) -> List[str]:
        cls.discover()
        return sorted(list(cls._all_codes))
