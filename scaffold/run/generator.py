from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from scaffold.collection.grouper import ResourceGrouper
from scaffold.collection.types import EndpointDescriptor, ResourceGroup
from scaffold.collection.walker import CollectionWalker
from scaffold.emit.models import ModelEmitter
from scaffold.emit.scaffolds import ScaffoldEmitter
from scaffold.export.artifact_sink import ArtifactSink
from scaffold.logging_utils import get_logger
from scaffold.run.config import GeneratorConfig
from scaffold.run.loader import load_collection
from scaffold.schema.engine import SchemaInferenceEngine
from scaffold.schema.types import RunState, SchemaNode

logger = get_logger("run")


@dataclass
class GenerationResult:
    schemas: List[SchemaNode]
    groups: List[ResourceGroup]
    endpoints: List[EndpointDescriptor]
    written: List[Path] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    state: Optional[RunState] = None

    @property
    def schema_names(self) -> List[str]:
        return [n.name for n in self.schemas]


class ScaffoldGenerator:
    """
    One collection in, models and test scaffolds out.

      1) fresh RunState for the run (dedup maps never leak between runs)
      2) walk the collection: bodies -> inference engine -> model artifacts,
         endpoints -> grouper
      3) render one test module per resource group
      4) optional shared conftest
    Writes go through the sink as soon as an artifact is ready; a failed write
    aborts the run and leaves earlier files in place.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, sink: Optional[ArtifactSink] = None) -> None:
        self.config = config or GeneratorConfig()
        self.sink = sink or ArtifactSink(self.config.output_dir)

    def run_file(self, collection_path: Path) -> GenerationResult:
        return self.run(load_collection(collection_path))

    def run(self, collection: Dict[str, Any]) -> GenerationResult:
        state = RunState()
        models = ModelEmitter(self.config, modules=state.model_modules)
        scaffolds = ScaffoldEmitter(
            self.config,
            schema_lookup=state.node,
            model_modules=state.model_modules,
            modules=state.test_modules,
        )
        grouper = ResourceGrouper()
        written_before = len(self.sink.written)

        engine = SchemaInferenceEngine(state, on_emit=lambda node: self.sink.write(models.render(node)))
        walker = CollectionWalker(engine, on_endpoint=grouper.add)
        endpoints = walker.walk(collection)

        groups = grouper.groups()
        for group in groups:
            self.sink.write(scaffolds.render(group))

        if self.config.generate_shared_fixture:
            self.sink.write(scaffolds.render_shared_fixture())

        logger.info(
            "Generated %d schemas and %d test modules (%d diagnostics)",
            len(state.nodes), len(groups), len(state.diagnostics),
        )
        return GenerationResult(
            schemas=list(state.nodes),
            groups=groups,
            endpoints=endpoints,
            written=self.sink.written[written_before:],
            diagnostics=list(state.diagnostics),
            state=state,
        )
