"""
命令行测试
"""

import pytest

from pinbi import __version__
from pinbi.cli import main


@pytest.fixture
def cli_data(monkeypatch, data_dir):
    monkeypatch.setenv("PINBI_DATA_DIR", str(data_dir))
    monkeypatch.setenv("PINBI_LEVELS", "3")
    monkeypatch.setenv("PINBI_DERIVE_VARIANTS", "0")
    return data_dir


class TestSearchCommand:

    def test_prints_entries(self, cli_data, capsys):
        main(["search", "hello"])
        out = capsys.readouterr().out
        assert "1. 你好 [nǐ hǎo] hello" in out

    def test_example_line(self, cli_data, capsys):
        main(["search", "爱"])
        out = capsys.readouterr().out
        assert "1. 爱 [ài] to love" in out
        assert "我爱你" in out

    def test_no_results(self, cli_data, capsys):
        main(["search", "zzzz"])
        assert "未找到结果" in capsys.readouterr().out


class TestHanziCommand:

    def test_shorthand_candidates(self, cli_data, capsys):
        main(["hanzi", "nh"])
        out = capsys.readouterr().out
        assert "1. 你好 (nǐ hǎo) [shorthand]" in out
        assert "2. 年华 (nián huá) [shorthand]" in out
        assert "3. " not in out

    def test_top_k(self, cli_data, capsys):
        main(["hanzi", "n", "-k", "2"])
        out = capsys.readouterr().out
        assert "2. " in out
        assert "3. " not in out


class TestDataLoadFailure:
    """词典目录缺失时给出错误信息并以状态码 1 退出"""

    @pytest.mark.parametrize("command", [["search", "hello"], ["hanzi", "ni"]])
    def test_missing_data_dir(self, monkeypatch, tmp_path, capsys, command):
        monkeypatch.setenv("PINBI_DATA_DIR", str(tmp_path / "missing"))
        monkeypatch.setenv("PINBI_DERIVE_VARIANTS", "0")
        with pytest.raises(SystemExit) as exc_info:
            main(command)
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "词典加载失败" in captured.err
        assert "hsk1.json" in captured.err
        assert "Traceback" not in captured.err


class TestOtherCommands:

    def test_tone(self, capsys):
        main(["tone", "hao", "3"])
        assert capsys.readouterr().out.strip() == "hǎo"

    def test_invalid_tone_unchanged(self, capsys):
        main(["tone", "hao3", "7"])
        assert capsys.readouterr().out.strip() == "hao3"

    def test_version(self, capsys):
        main(["version"])
        assert capsys.readouterr().out.strip() == f"pinbi v{__version__}"

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
