"""
High-level API for imapipe

Convenience functions for running a pipeline over image files.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from .models.process_result import ProcessResult
from .pipeline import Pipeline
from .validation.image_validator import ImageValidator

logger = logging.getLogger(__name__)

PipelineLike = Union[Pipeline, Iterable[str]]


def _as_pipeline(pipeline: PipelineLike) -> Pipeline:
    if isinstance(pipeline, Pipeline):
        return pipeline
    return Pipeline.from_descriptors(pipeline)


def process_image(
    image_path: Path,
    pipeline: PipelineLike,
    output_path: Optional[Path] = None
) -> ProcessResult:
    """
    Load an image file, transform it and optionally save it.

    Args:
        image_path: Path to image file
        pipeline: Pipeline, or descriptor strings to build one from
        output_path: Where to write the result. None (default) = do not save.
                     The format follows the output file extension.

    Returns:
        ProcessResult. success is False if the file is invalid, loading or
        saving fails, or any operation reported a failure.

    Example:
        >>> from pathlib import Path
        >>> from imapipe import process_image
        >>>
        >>> result = process_image(
        ...     Path("photo.jpg"),
        ...     ["resize[800,*]", "levels[0.05,*,0.95]"],
        ...     output_path=Path("out/photo.png"),
        ... )
        >>> print(result.width, result.height)
    """
    image_path = Path(image_path)

    image, error = ImageValidator.load(image_path)
    if error is not None:
        return ProcessResult(success=False, source_path=image_path, error=error)

    try:
        pipeline = _as_pipeline(pipeline)
        applied = pipeline.apply(image)

        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            image.save(output_path)

        return ProcessResult(
            success=applied,
            source_path=image_path,
            output_path=output_path,
            width=image.width,
            height=image.height,
            frames=image.get_num_frames(),
            error=None if applied else "One or more operations failed",
        )

    except Exception as e:
        logger.error("Processing %s failed: %s", image_path, e)
        return ProcessResult(
            success=False,
            source_path=image_path,
            error=f"Processing failed: {str(e)}"
        )


def batch_process(
    image_paths: List[Path],
    pipeline: PipelineLike,
    output_dir: Optional[Path] = None,
    output_format: Optional[str] = None,
    progress_callback: Optional[Callable[[int, int, ProcessResult], None]] = None
) -> List[ProcessResult]:
    """
    Run one pipeline over many images, one after another.

    The pipeline is built once and reused for every image.

    Args:
        image_paths: List of paths to image files
        pipeline: Pipeline, or descriptor strings to build one from
        output_dir: Directory for the results. None (default) = do not save.
        output_format: Output extension such as "png". None keeps each
                       source file's extension.
        progress_callback: Optional callback(current, total, result)

    Returns:
        List of ProcessResult objects

    Example:
        >>> from pathlib import Path
        >>> from imapipe import batch_process
        >>>
        >>> images = list(Path("./photos").glob("*.png"))
        >>>
        >>> def on_progress(current, total, result):
        ...     status = "ok" if result.success else result.error
        ...     print(f"[{current}/{total}] {result.source_path.name}: {status}")
        >>>
        >>> results = batch_process(
        ...     images, ["aspect[16:9,crop]", "resize[1920,1080]"],
        ...     output_dir=Path("./out"), progress_callback=on_progress,
        ... )
    """
    pipeline = _as_pipeline(pipeline)
    results = []
    total = len(image_paths)

    for i, path in enumerate(image_paths, 1):
        path = Path(path)
        output_path = None
        if output_dir is not None:
            suffix = f".{output_format.lstrip('.')}" if output_format else path.suffix
            output_path = Path(output_dir) / f"{path.stem}{suffix}"

        result = process_image(path, pipeline, output_path=output_path)
        results.append(result)

        if progress_callback:
            progress_callback(i, total, result)

    return results
