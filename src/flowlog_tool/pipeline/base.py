from __future__ import annotations

from dataclasses import dataclass, field
from importlib import import_module
from pathlib import Path
from typing import Any, Callable, Iterable, Optional
import json

import yaml

from ..logging import get_logger
from ..exceptions import InputReadError
from .components import BaseAnalyzer, BaseProcessor, BaseReporter, Context

logger = get_logger(__name__)

# Undotted component names are looked up here.
STAGES_MODULE = "flowlog_tool.pipeline.stages"

# Config sections in run order, with the base class their components need.
_SECTIONS = {
    "processors": BaseProcessor,
    "analyzers": BaseAnalyzer,
    "reporters": BaseReporter,
}


@dataclass
class Pipeline:
    """Ordered chain of processors, analyzers and reporters."""

    processors: list[BaseProcessor] = field(default_factory=list)
    analyzers: list[BaseAnalyzer] = field(default_factory=list)
    reporters: list[BaseReporter] = field(default_factory=list)

    def add_processor(self, processor: BaseProcessor) -> None:
        self.processors.append(processor)

    def add_analyzer(self, analyzer: BaseAnalyzer) -> None:
        self.analyzers.append(analyzer)

    def add_reporter(self, reporter: BaseReporter) -> None:
        self.reporters.append(reporter)

    def _iter_components(self) -> Iterable[Any]:
        yield from self.processors
        yield from self.analyzers
        yield from self.reporters

    def run(
        self,
        data: Optional[Context] = None,
        on_progress: Optional[Callable[[int, Optional[int]], None]] = None,
    ) -> Context:
        """Execute every stage in order, threading the context through."""
        context: Context = dict(data or {})
        total_steps = len(self.processors) + len(self.analyzers) + len(self.reporters)
        step = 0
        for component in self._iter_components():
            step += 1
            if on_progress:
                on_progress(step, total_steps)
            logger.debug("Running stage %d/%d: %s", step, total_steps, type(component).__name__)
            if isinstance(component, BaseProcessor):
                context = component.process(context, on_progress=on_progress)
            elif isinstance(component, BaseAnalyzer):
                context = component.analyze(context)
            elif isinstance(component, BaseReporter):
                context = component.report(context)
        if on_progress:
            on_progress(total_steps, total_steps)
        return context

    @classmethod
    def from_config(cls, path: str | Path) -> "Pipeline":
        """Create a pipeline from a YAML or JSON configuration file.

        Each section lists components either as a class path string or as a
        mapping with ``name`` and optional ``params``. Undotted names refer
        to the stock stages::

            processors:
              - name: FlowLogLoader
                params: {flow_logs: flow_logs.csv, tag_rules: tag_rules.csv}
            analyzers: [PortProtocolCounter, TagCounter]
            reporters:
              - CsvReporter

        Raises
        ------
        InputReadError
            If the file cannot be read.
        ValueError
            If the file is not a mapping of the three sections, or a
            component cannot be loaded or sits in the wrong section.
        """
        config_path = Path(path)
        suffix = config_path.suffix.lower()
        if suffix not in {".yaml", ".yml", ".json"}:
            raise ValueError(
                f"Unsupported configuration file format for {config_path}: '{config_path.suffix}'. "
                "Supported formats are YAML (.yaml, .yml) and JSON (.json)."
            )
        try:
            with config_path.open("r", encoding="utf-8") as fh:
                config = json.load(fh) if suffix == ".json" else yaml.safe_load(fh)
        except OSError as exc:
            raise InputReadError(
                f"Error reading pipeline configuration: {config_path}", path=config_path
            ) from exc
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ValueError(f"Malformed pipeline configuration {config_path}: {exc}") from exc

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(
                f"Pipeline configuration {config_path} must be a mapping of "
                f"{', '.join(_SECTIONS)}, got {type(config).__name__}"
            )
        unknown = set(config) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown pipeline sections in {config_path}: {sorted(unknown)}")

        pipeline = cls()
        adders = {
            "processors": pipeline.add_processor,
            "analyzers": pipeline.add_analyzer,
            "reporters": pipeline.add_reporter,
        }
        for section, base_cls in _SECTIONS.items():
            items = config.get(section) or []
            if not isinstance(items, list):
                raise ValueError(f"Section '{section}' must be a list of components")
            for item in items:
                if isinstance(item, str):
                    obj = _load_object(item, {})
                elif isinstance(item, dict):
                    name = item.get("name")
                    if not isinstance(name, str) or not name:
                        raise ValueError(
                            f"Invalid or missing 'name' for component in section '{section}': {item}"
                        )
                    obj = _load_object(name, item.get("params") or {})
                else:
                    raise ValueError(f"Invalid component in section '{section}': {item!r}")
                if not isinstance(obj, base_cls):
                    raise ValueError(
                        f"Component {type(obj).__name__} in section '{section}' is not a {base_cls.__name__}"
                    )
                adders[section](obj)
        logger.debug(
            "Loaded pipeline from %s: %d processors, %d analyzers, %d reporters",
            config_path,
            len(pipeline.processors),
            len(pipeline.analyzers),
            len(pipeline.reporters),
        )
        return pipeline


def _load_object(path: str, params: dict) -> Any:
    if "." in path:
        module_name, _, attr = path.rpartition(".")
    else:
        module_name, attr = STAGES_MODULE, path
    try:
        module = import_module(module_name)
    except ModuleNotFoundError as e:
        raise ValueError(f"Failed to import module '{module_name}' for component '{path}': {e}") from e
    try:
        cls = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"Failed to find class '{attr}' in module '{module_name}' for component '{path}': {e}") from e
    try:
        return cls(**params)
    except TypeError as e:
        raise ValueError(f"Failed to instantiate component '{path}' with params {params}: {e}") from e
