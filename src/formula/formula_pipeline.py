"""Composition of single-argument stages into a pipeline."""

import logging
from typing import Any, Callable, Tuple


class FormulaPipeline:
    """
    Ordered chain of stages, each taking the previous stage's output.

    Pipelines are immutable: `append()` returns a new pipeline.  A stage fails
    by raising, which stops the run and propagates the exception to the caller.
    """

    def __init__(self, *stages: Callable[[Any], Any]) -> None:
        """
        Initialize the pipeline.

        Args:
            stages: Stages to run, in order
        """
        self._stages: Tuple[Callable[[Any], Any], ...] = stages
        self._logger = logging.getLogger("FormulaPipeline")

    @property
    def stages(self) -> Tuple[Callable[[Any], Any], ...]:
        """Stages of this pipeline, in order."""
        return self._stages

    def append(self, stage: Callable[[Any], Any]) -> 'FormulaPipeline':
        """Return a new pipeline with a stage added at the end."""
        return FormulaPipeline(*self._stages, stage)

    def run(self, value: Any) -> Any:
        """
        Feed a value through every stage in order.

        Args:
            value: Input to the first stage

        Returns:
            Output of the last stage, or the input itself if there are no stages
        """
        for index, stage in enumerate(self._stages):
            name = getattr(stage, '__qualname__', repr(stage))
            self._logger.debug("running stage %d: %s", index, name)
            value = stage(value)

        return value

    def __len__(self) -> int:
        return len(self._stages)
