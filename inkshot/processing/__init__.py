from .screenshot import (
    CONTENT_TYPES,
    FORMATS,
    ROTATIONS,
    ProcessedImage,
    ScreenshotParams,
    ScreenshotProcessor,
    apply_legacy_eink,
    bmp_bits_for_levels,
    convert_to_format,
    parse_screenshot_params,
    process_screenshot,
)

__all__ = [
    "CONTENT_TYPES",
    "FORMATS",
    "ROTATIONS",
    "ProcessedImage",
    "ScreenshotParams",
    "ScreenshotProcessor",
    "apply_legacy_eink",
    "bmp_bits_for_levels",
    "convert_to_format",
    "parse_screenshot_params",
    "process_screenshot",
]
