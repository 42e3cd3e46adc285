"""Demo entrypoint: classify one packaged image and display the label.

Usage:
    piece-classifier-demo                                   # defaults
    piece-classifier-demo classifier.assets_dir=./assets    # other assets
    piece-classifier-demo classifier.region=[0,0,32,32]     # crop first
    piece-classifier-demo classifier.snapshot.enabled=true  # debug JPEG
"""

import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import hydra
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from piece_classifier.config import ClassifierConfig
from piece_classifier.display import BaseDisplay, ConsoleDisplay
from piece_classifier.errors import ClassifierError
from piece_classifier.io.result import ClassificationResultWriter
from piece_classifier.pipeline import ClassificationPipeline
from piece_classifier.schemas.prediction import ClassificationResult


def run(config: ClassifierConfig, display: BaseDisplay) -> ClassificationResult:
    """Load everything, show the image, classify it off-thread, show the label.

    Any :class:`ClassifierError` ends the run; there are no retries.
    """
    pipeline = ClassificationPipeline.from_config(config)
    image, pixels = pipeline.load_image(config.image_asset)
    display.set_image(image)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="classify") as pool:
        future = pipeline.submit_pixels(
            pixels,
            pool,
            callback=lambda r: display.set_text(r.label),
            filename=config.image_asset,
        )
        result = future.result()

    if config.output_dir is not None:
        out_path = ClassificationResultWriter(Path(config.output_dir)).write(result)
        logger.info(f"Result written to {out_path}")
    return result


@hydra.main(version_base=None, config_path="conf", config_name="demo")
def main(cfg: DictConfig) -> None:
    """Run the demo with the given Hydra config."""
    logger.remove()
    logger.add(sys.stderr, level=cfg.get("log_level", "INFO"))

    logger.debug(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")
    config = ClassifierConfig.model_validate(
        OmegaConf.to_container(cfg.classifier, resolve=True)
    )

    try:
        run(config, ConsoleDisplay())
    except ClassifierError as e:
        logger.error(f"Classification aborted: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
