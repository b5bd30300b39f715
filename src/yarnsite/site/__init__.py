"""Site - Contract for the site being rebuilt."""

from yarnsite.site.protocol import Site

__all__ = ["Site"]
