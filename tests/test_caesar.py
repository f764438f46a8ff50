"""
Тесты взломщика и командной строки
"""

import io
import math

import pytest

import caesar
from caesar import (
    Analyzer,
    ShiftResult,
    chi_squared,
    bigram_score,
    index_of_coincidence,
    word_score,
    run,
)
from caesar_encode import InvalidShiftType, caesar_encrypt, caesar_decrypt

PLAIN = "It was the best of times, it was the worst of times, it was the age of wisdom"
SECRET = caesar_encrypt(PLAIN, 7)


# ═══════════════════════════════════════════════════════════════════════════════
# СКОРЕРЫ
# ═══════════════════════════════════════════════════════════════════════════════

def test_chi_squared_without_letters():
    assert math.isinf(chi_squared(""))
    assert math.isinf(chi_squared("123 !?"))


def test_chi_squared_prefers_english():
    assert chi_squared(PLAIN) < chi_squared(SECRET)


def test_bigram_score():
    assert bigram_score("abc") == 0.0
    assert bigram_score("then") == 1.0   # th, he, en
    assert 0.0 <= bigram_score(SECRET) <= 1.0


def test_index_of_coincidence():
    assert index_of_coincidence("") == 0.0
    assert index_of_coincidence("aaaa") == 1.0
    assert index_of_coincidence("ab") == 0.0


def test_word_score():
    assert word_score("") == (0.0, 0, 0)
    score, matches, total = word_score("the zzz")
    assert (matches, total) == (1, 2)
    assert 0.0 < score < 1.0
    assert word_score("the and of")[0] == 1.0


def test_confidence_is_capped():
    r = ShiftResult(shift=1, text="x", chi_sq=0.0, bigram_score=1.0,
                    word_score=1.0, combined=1.5, matches=1, total_words=1)
    assert r.confidence == 100.0


# ═══════════════════════════════════════════════════════════════════════════════
# АНАЛИЗАТОР
# ═══════════════════════════════════════════════════════════════════════════════

def test_brute_force_lists_every_shift_in_order():
    results = Analyzer().brute_force("Khoor")
    assert [r.shift for r in results] == list(range(26))
    for r in results:
        assert r.text == caesar_decrypt("Khoor", r.shift)


def test_crack_finds_key():
    results = Analyzer().crack(SECRET)
    assert len(results) == 26
    assert results[0].shift == 7
    assert results[0].text == PLAIN
    assert results[0].combined >= results[1].combined


def test_crack_short_text():
    best = Analyzer().crack("Khoor, Zruog!")[0]
    assert best.shift == 3
    assert best.text == "Hello, World!"


def test_crack_without_letters():
    results = Analyzer().crack("123")
    assert len(results) == 26
    assert all(r.text == "123" for r in results)


def test_is_already_plaintext():
    analyzer = Analyzer()
    assert analyzer.is_already_plaintext(PLAIN)
    assert not analyzer.is_already_plaintext(SECRET)


# ═══════════════════════════════════════════════════════════════════════════════
# КОМАНДНАЯ СТРОКА
# ═══════════════════════════════════════════════════════════════════════════════

def test_cli_encrypt_raw(capsys):
    assert run(["-s", "3", "-r", "Hello,", "World!"]) == 0
    assert capsys.readouterr().out == "Khoor, Zruog!\n"


def test_cli_decrypt_raw(capsys):
    assert run(["-s", "3", "-d", "-r", "Khoor, Zruog!"]) == 0
    assert capsys.readouterr().out == "Hello, World!\n"


def test_cli_negative_shift(capsys):
    assert run(["-s", "-1", "-r", "a"]) == 0
    assert capsys.readouterr().out == "z\n"


def test_cli_crack_raw(capsys):
    assert run(["-r", SECRET]) == 0
    assert capsys.readouterr().out == PLAIN + "\n"


def test_cli_brute_raw(capsys):
    assert run(["-r", "--brute", "Khoor"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 26
    assert lines[0] == "0\tKhoor"
    assert lines[3] == "3\tHello"


def test_cli_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("Hello\n"))
    assert run(["-s", "1", "-r"]) == 0
    assert capsys.readouterr().out == "Ifmmp\n"


def test_cli_empty_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert run(["-r"]) == 1
    assert "Ошибка" in capsys.readouterr().err


def test_cli_decrypt_needs_shift(capsys):
    assert run(["-d", "-r", "abc"]) == 1
    assert "--shift" in capsys.readouterr().err


def test_cli_full_output(capsys):
    assert run(["-s", "3", "Hello"]) == 0
    out = capsys.readouterr().out
    assert "CAESAR" in out
    assert "Khoor" in out


def test_cli_full_crack_output(capsys):
    assert run(["Khoor, Zruog!"]) == 0
    assert "Hello, World!" in capsys.readouterr().out


def test_main_exit_codes(monkeypatch):
    monkeypatch.setattr("sys.argv", ["caesar", "-s", "1", "-r", "a"])
    with pytest.raises(SystemExit) as exc:
        caesar.main()
    assert exc.value.code == 0

    def broken(argv=None):
        raise InvalidShiftType("1")

    monkeypatch.setattr(caesar, "run", broken)
    with pytest.raises(SystemExit) as exc:
        caesar.main()
    assert exc.value.code == 1


def test_rank_orders_best_first():
    analyzer = Analyzer()
    by_shift = analyzer.brute_force(SECRET)
    ranked = analyzer.rank(by_shift)
    assert ranked[0].shift == 7
    assert [r.shift for r in by_shift] == list(range(26))
    assert sorted(r.shift for r in ranked) == list(range(26))


# ═══════════════════════════════════════════════════════════════════════════════
# КОМАНДНАЯ СТРОКА: скобки во вводе
# ═══════════════════════════════════════════════════════════════════════════════

def test_cli_crack_with_closing_tag_text(capsys):
    assert run(["[/b] Khoor zruog"]) == 0
    out = capsys.readouterr().out
    assert "Hello world" in out
    assert "[/" in out


def test_cli_brute_with_closing_tag_text(capsys):
    assert run(["--brute", "[/b] Khoor"]) == 0
    assert "[/b] Khoor" in capsys.readouterr().out


def test_cli_brute_keeps_opening_tag_text(capsys):
    assert run(["--brute", "[bold] Khoor"]) == 0
    assert "[bold] Khoor" in capsys.readouterr().out


def test_cli_brute_scores_each_shift_once(monkeypatch, capsys):
    calls = []
    original = Analyzer.brute_force

    def counting(self, text):
        calls.append(text)
        return original(self, text)

    monkeypatch.setattr(Analyzer, "brute_force", counting)
    assert run(["--brute", "Khoor"]) == 0
    assert run(["-r", "--brute", "Khoor"]) == 0
    assert len(calls) == 2


def test_cli_brute_with_shift_rejected(capsys):
    with pytest.raises(SystemExit) as exc:
        run(["--brute", "-s", "3", "Khoor"])
    assert exc.value.code == 2
    assert "--brute" in capsys.readouterr().err


# ═══════════════════════════════════════════════════════════════════════════════
# main(): коды выхода
# ═══════════════════════════════════════════════════════════════════════════════

def test_main_keyboard_interrupt(monkeypatch, capsys):
    def interrupted(argv=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(caesar, "run", interrupted)
    caesar.main()
    assert "👋" in capsys.readouterr().out


def test_main_unexpected_error_prints_traceback(monkeypatch, capsys):
    def broken(argv=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(caesar, "run", broken)
    with pytest.raises(SystemExit) as exc:
        caesar.main()
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "boom" in err
    assert "Traceback" in err
