"""Tests for the thread-pool batch runner."""

from models.compression_budget import CompressionBudget
from models.errors import BudgetUnsatisfiable, DecodeError
from engines.batch import compress_many


def test_outcomes_keep_input_order(recording_codec, image_bytes):
    codec = recording_codec(density=0.5)
    inputs = [image_bytes(100 + i, 50) for i in range(12)]
    outcomes = compress_many(inputs, CompressionBudget(1_000_000, 1024, 80), codec, max_workers=4)
    assert [o.index for o in outcomes] == list(range(12))
    assert [o.result.width for o in outcomes] == [100 + i for i in range(12)]
    assert all(o.ok for o in outcomes)


def test_errors_become_values(recording_codec, image_bytes):
    """Decode errors carry no result; unsatisfiable budgets carry the best effort."""
    codec = recording_codec(incompressible=True)
    budget = CompressionBudget(5000, 1024, 80)
    outcomes = compress_many([image_bytes(40, 40), b'garbage', image_bytes(200, 200)], budget, codec)
    
    fits, broken, too_big = outcomes
    assert fits.ok and fits.result.size == 40 * 40 * 3
    assert isinstance(broken.error, DecodeError) and broken.result is None
    assert isinstance(too_big.error, BudgetUnsatisfiable)
    assert too_big.result is too_big.error.best_effort
    assert not too_big.ok


def test_empty_batch(recording_codec):
    assert compress_many([], CompressionBudget(10, 10, 10), recording_codec()) == []
