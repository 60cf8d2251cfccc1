from geosvg.project_types import (
    BoundingBox,
    ConverterConfig,
    ExtentSource,
    FitTo,
    RenderOptions,
    TransformOptions,
)

CONFIG: ConverterConfig = ConverterConfig(
    transform=TransformOptions(
        sample_points=250,
        flip_y=True,  # SVG y grows downward, geographic y upward
        precision=2,
    ),
    render=RenderOptions(
        viewport_width=640,
        viewport_height=480,
        fit_to=FitTo.WIDTH,
        precision=2,
        point_radius=2,
        extent_source=ExtentSource.AUTO,
        custom_extent=BoundingBox(-180, -90, 180, 90),  # (Left, Bottom, Right, Top)
    ),
    output_dir="converted",
    log_level="INFO",
)
