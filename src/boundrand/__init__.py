"""Unbiased bounded-range integers from a uniform 64-bit stream.

This module draws integers uniformly from a closed interval of 64-bit
unsigned integers using Daniel Lemire's multiply-and-reject method: one
wide multiplication per draw, and a division only on the rare path where
a draw might be biased.

Classes:
    RangeSampler: A source bound to a configuration, for repeated draws.
    SampleTrace: Record of the draws one call consumed.
    SamplerConfig: Checking and logging configuration.
    RandomSource, SystemSource, CallableSource, ReplaySource: Source adapters.

Functions:
    sample(rng, lo, hi): Uniform integer in [lo, hi] (64-bit unsigned bounds).
    sample_traced(rng, lo, hi): Same, also returning a SampleTrace.
    rejection_threshold(s): 2**64 mod s.
    randint(rng, a, b): Uniform integer in [a, b] for any Python ints.
    randrange(rng, start, stop): Uniform integer in [start, stop).
    as_source(obj): Coerce a generator-like object into a U64Source.
    init(...), get_config(): Global configuration.
"""

from boundrand._config import SamplerConfig, get_config, init, reset_config
from boundrand._logging import configure_logging, get_logger, reset_logging
from boundrand._sampler import (
    U64_MAX,
    RangeSampler,
    SampleTrace,
    randint,
    randrange,
    rejection_threshold,
    sample,
    sample_traced,
)
from boundrand.errors import (
    InvalidDraw,
    InvalidDrawError,
    InvalidInterval,
    InvalidIntervalError,
    SourceExhausted,
    SourceExhaustedError,
)
from boundrand.sources import (
    CallableSource,
    RandomSource,
    ReplaySource,
    SystemSource,
    U64Source,
    as_source,
)

__all__ = [
    'U64_MAX',
    'CallableSource',
    'InvalidDraw',
    'InvalidDrawError',
    'InvalidInterval',
    'InvalidIntervalError',
    'RandomSource',
    'RangeSampler',
    'ReplaySource',
    'SampleTrace',
    'SamplerConfig',
    'SourceExhausted',
    'SourceExhaustedError',
    'SystemSource',
    'U64Source',
    'as_source',
    'configure_logging',
    'get_config',
    'get_logger',
    'init',
    'randint',
    'randrange',
    'rejection_threshold',
    'reset_config',
    'reset_logging',
    'sample',
    'sample_traced',
]
