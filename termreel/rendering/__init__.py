"""Text rendering of decoded frames.

- FrameRenderer: Scale a frame and map its pixels to palette glyphs
- RawFrame: A decoded RGB pixel buffer
- LazyFrame / TextFrame: Rendered-on-demand and pre-rendered frames
"""

from .frame import LazyFrame, RawFrame, RenderedFrame, TextFrame
from .renderer import FrameRenderer, RenderMetrics

__all__ = [
    "FrameRenderer",
    "RenderMetrics",
    "RawFrame",
    "RenderedFrame",
    "LazyFrame",
    "TextFrame",
]
