"""
Tests for configuration loading.
"""

from spotlight_search.config import Config, load_config


def test_defaults_without_files(temp_dir):
    config = load_config([temp_dir / "missing.toml"])
    assert config == Config()
    assert config.indexing.table_size == 16384
    assert config.search.max_results == 12
    assert config.session.max_query_length == 255
    assert config.session.clear_query_on_cancel is False


def test_first_existing_file_wins(temp_dir):
    first = temp_dir / "first.toml"
    second = temp_dir / "second.toml"
    first.write_text(
        "[indexing]\n"
        "ignore_patterns = [\"*.log\"]\n"
        "include_hidden = false\n"
        "[search]\n"
        "max_results = 30\n"
        "[session]\n"
        "clear_query_on_cancel = true\n"
        "path_width = 80\n"
    )
    second.write_text("[search]\nmax_results = 99\n")

    config = load_config([temp_dir / "missing.toml", first, second])
    assert config.indexing.ignore_patterns == ["*.log"]
    assert config.indexing.include_hidden is False
    assert config.indexing.table_size == 16384
    assert config.search.max_results == 30
    assert config.session.clear_query_on_cancel is True
    assert config.session.path_width == 80
    assert config.session.filename_width == 35


def test_broken_file_falls_back_to_next(temp_dir, capsys):
    broken = temp_dir / "broken.toml"
    broken.write_text("[search\nmax_results = ")
    good = temp_dir / "good.toml"
    good.write_text("[search]\nmax_results = 7\n")

    config = load_config([broken, good])
    assert config.search.max_results == 7
    assert "Failed to load config" in capsys.readouterr().err
