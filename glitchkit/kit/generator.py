"""
Kit generation: detect transients once, then select and process one slice per
kit index. Rejected slices are skipped, not retried, so a kit can come back
smaller than requested. Shot ids are assigned after the fact, contiguous from 0.
"""
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Union

from glitchkit.core.errors import MissingSource
from glitchkit.core.rng import RandomSource, shot_rng
from glitchkit.core.types import Kit, SampleBuffer, Shot, SkippedSlice
from glitchkit.dsp.transients import detect_transients
from glitchkit.kit.shot import process_shot
from glitchkit.kit.slicer import select_slice
from glitchkit.params.defaults import KIT_SIZE
from glitchkit.params.schema import ShotParameters

logger = logging.getLogger(__name__)

RngFactory = Callable[[int], RandomSource]
_Outcome = Union[SampleBuffer, SkippedSlice]


class KitGenerator:
    """
    Builds kits from a source buffer.

    Randomness: index i draws from rng_factory(i). The default factory is
    shot_rng(seed, i), so the same seed reproduces the same kit regardless of
    `workers`. With workers > 1 indices are processed on a thread pool and
    merged back in index order.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        workers: int = 1,
        rng_factory: Optional[RngFactory] = None,
    ):
        if seed is None:
            seed = random.randint(0, 2**31 - 1)
        self.seed = int(seed)
        self.workers = max(1, int(workers))
        self._rng_factory = rng_factory or (lambda index: shot_rng(self.seed, index))

    def generate(
        self,
        source: Optional[SampleBuffer],
        params: ShotParameters,
        target_count: int = KIT_SIZE,
    ) -> Kit:
        if source is None or source.length == 0:
            raise MissingSource("no source audio loaded")

        transients = detect_transients(source, params.threshold)
        logger.info(
            "Generating %d shots (seed=%d): %d transients in %.2fs source",
            target_count,
            self.seed,
            len(transients),
            source.duration,
        )

        indices = range(max(0, int(target_count)))
        if self.workers > 1 and len(indices) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                outcomes = list(pool.map(lambda i: self._make_one(i, source, transients, params), indices))
        else:
            outcomes = [self._make_one(i, source, transients, params) for i in indices]

        kit = Kit(requested=len(indices))
        for outcome in outcomes:
            if isinstance(outcome, SkippedSlice):
                kit.skipped.append(outcome)
            else:
                kit.shots.append(Shot(id=len(kit.shots), buffer=outcome))

        logger.info("Generated %d/%d shots (%d skipped)", kit.produced, kit.requested, len(kit.skipped))
        return kit

    def _make_one(
        self,
        index: int,
        source: SampleBuffer,
        transients: Sequence[int],
        params: ShotParameters,
    ) -> _Outcome:
        rng = self._rng_factory(index)
        choice = select_slice(source, transients, params.max_length_s, rng)
        if not choice.accepted:
            logger.debug(
                "Shot %d skipped (%s): start=%d length=%d source=%d",
                index,
                choice.reject_reason,
                choice.start,
                choice.length,
                source.length,
            )
            return SkippedSlice(index, choice.reject_reason)
        return process_shot(choice.buffer, params.attack_s, params.pitch_variation, rng)


def generate_kit(
    source: Optional[SampleBuffer],
    params: ShotParameters,
    target_count: int = KIT_SIZE,
    seed: Optional[int] = None,
) -> List[Shot]:
    """Convenience wrapper returning just the ordered shots."""
    return KitGenerator(seed=seed).generate(source, params, target_count).shots
