import pytest

from graphexpr import GenerateOptions, get_generate_options, set_generate_options


def test_get_returns_copy():
    options = get_generate_options()
    options.chunk_rows = 1
    assert get_generate_options().chunk_rows != 1


def test_set_replaces_defaults():
    original = get_generate_options()
    try:
        set_generate_options(GenerateOptions(max_workers=2, chunk_rows=16))
        assert get_generate_options().max_workers == 2
        assert get_generate_options().chunk_rows == 16
    finally:
        set_generate_options(original)


@pytest.mark.parametrize(
    "options",
    [
        GenerateOptions(max_workers=0),
        GenerateOptions(chunk_rows=0),
        GenerateOptions(parallel_threshold=-1),
    ],
)
def test_set_rejects_invalid_options(options):
    with pytest.raises(ValueError):
        set_generate_options(options)
