"""
Font resolution against the host.

Every requested (family, weight, italic) resolves to a font the host has
actually loaded. Candidates are tried one at a time, in a fixed order:

1. the exact family and style
2. the same family without italic
3. a mapped fallback family, with and without italic
4. generic candidates for the family's category (serif, monospace, sans)
5. Inter Regular, then Arial Regular

Only the very last attempt may fail out of :meth:`FontResolver.resolve`.
"""

import re
from typing import Dict, List, Set, Tuple

from slidegraph.core.interfaces import SceneHost
from slidegraph.exceptions import FontUnavailableError
from slidegraph.models.scene import ResolvedFont
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

# Families commonly found in decks, mapped to families the host is likely to have
FONT_FALLBACKS: Dict[str, str] = {
    # Sans-serif fonts
    'Arial': 'Inter',
    'Helvetica': 'Inter',
    'Roboto': 'Inter',
    'Open Sans': 'Inter',
    'Lato': 'Inter',
    'Montserrat': 'Inter',
    'Source Sans Pro': 'Inter',
    'Nunito': 'Inter',
    'Poppins': 'Inter',
    # Serif fonts
    'Times New Roman': 'Georgia',
    'Georgia': 'Georgia',
    'Playfair Display': 'Georgia',
    'Merriweather': 'Georgia',
    'Lora': 'Georgia',
    # Monospace fonts
    'Courier New': 'Roboto Mono',
    'Consolas': 'Roboto Mono',
    'Monaco': 'Roboto Mono',
    'Source Code Pro': 'Roboto Mono',
}

SERIF_PATTERN = re.compile(r"serif|georgia|times|garamond|palatino", re.IGNORECASE)
MONOSPACE_PATTERN = re.compile(r"mono|courier|consolas|code", re.IGNORECASE)

CATEGORY_CANDIDATES: Dict[str, List[str]] = {
    "monospace": ["Roboto Mono", "Courier New"],
    "serif": ["Georgia", "Times New Roman"],
    "sans-serif": ["Inter", "Roboto", "Arial"],
}

LAST_RESORT = (
    ResolvedFont("Inter", "Regular"),
    ResolvedFont("Arial", "Regular"),
)


def style_for(weight: float, italic: bool) -> str:
    """Host style name for a numeric weight and italic flag."""
    if weight >= 700 and italic:
        return "Bold Italic"
    if weight >= 700:
        return "Bold"
    if italic:
        return "Italic"
    return "Regular"


def weight_only_style(weight: float) -> str:
    return "Bold" if weight >= 700 else "Regular"


def font_category(family: str) -> str:
    """Classify a family name as monospace, serif or sans-serif."""
    if MONOSPACE_PATTERN.search(family):
        return "monospace"
    if SERIF_PATTERN.search(family):
        return "serif"
    return "sans-serif"


def fallback_ladder(family: str, weight: float, italic: bool) -> List[ResolvedFont]:
    """Ordered candidates for a request, excluding the last-resort fonts."""
    style = style_for(weight, italic)
    plain = weight_only_style(weight)

    families = [family]
    mapped = FONT_FALLBACKS.get(family)
    if mapped:
        families.append(mapped)
    families.extend(CATEGORY_CANDIDATES[font_category(family)])

    ladder: List[ResolvedFont] = []
    for candidate in families:
        for candidate_style in ([style, plain] if italic else [style]):
            font = ResolvedFont(candidate, candidate_style)
            if font not in ladder:
                ladder.append(font)
    return ladder


class FontResolver:
    """Resolves requested fonts to loadable ones for one import.

    With ``memoize`` on, results are cached per (family, weight, italic) and
    faces the host already refused are not requested again.
    """

    def __init__(self, host: SceneHost, memoize: bool = True):
        self.host = host
        self.memoize = memoize
        self.attempts = 0
        self._resolved: Dict[Tuple[str, float, bool], ResolvedFont] = {}
        self._loaded: Set[ResolvedFont] = set()
        self._failed: Set[ResolvedFont] = set()

    def reset(self) -> None:
        self._resolved.clear()
        self._loaded.clear()
        self._failed.clear()

    async def resolve(self, family: str, weight: float = 400, italic: bool = False) -> ResolvedFont:
        key = (family, weight, italic)
        if self.memoize and key in self._resolved:
            return self._resolved[key]

        for font in fallback_ladder(family, weight, italic):
            if await self._try_load(font):
                return self._remember(key, font)

        return self._remember(key, await self._last_resort(family))

    def _remember(self, key: Tuple[str, float, bool], font: ResolvedFont) -> ResolvedFont:
        if self.memoize:
            self._resolved[key] = font
        requested = f"{key[0]} {style_for(key[1], key[2])}"
        if requested != str(font):
            logger.debug(f"Resolved font {requested} -> {font}")
        return font

    async def _try_load(self, font: ResolvedFont) -> bool:
        if self.memoize:
            if font in self._loaded:
                return True
            if font in self._failed:
                return False

        self.attempts += 1
        try:
            await self.host.load_font(font)
        except Exception as e:
            logger.debug(f"Font load failed for {font}: {e}")
            self._failed.add(font)
            return False

        self._loaded.add(font)
        return True

    async def _last_resort(self, family: str) -> ResolvedFont:
        inter, arial = LAST_RESORT
        if await self._try_load(inter):
            return inter

        logger.warning(f"No fallback found for {family!r}; trying {arial}")
        if self.memoize and arial in self._loaded:
            return arial
        if self.memoize and arial in self._failed:
            raise FontUnavailableError(
                f"No usable font: {arial} failed to load",
                context={'requested_family': family}
            )

        self.attempts += 1
        try:
            await self.host.load_font(arial)
        except Exception as e:
            self._failed.add(arial)
            raise FontUnavailableError(
                f"No usable font: {arial} failed to load",
                cause=e,
                context={'requested_family': family}
            ) from e

        self._loaded.add(arial)
        return arial
