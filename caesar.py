#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CAESAR — шифрование, дешифровка и взлом шифра Цезаря (латиница)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  • caesar -s 3 Hello         → шифрование ключом 3
  • caesar -s 3 -d Khoor      → расшифровка ключом 3
  • caesar Khoor, Zruog!      → взлом: перебор 26 ключей + оценка
  • caesar --brute Khoor      → таблица всех 26 вариантов

Оценка кандидатов при взломе:
  1. Chi-squared частотный анализ (частоты английского языка)
  2. Биграммный анализ (для коротких текстов)
  3. Частые английские слова
  4. Index of Coincidence (определение: зашифрован ли текст?)
"""

import sys
import re
import logging
import argparse
from typing import List, Tuple, Optional
from dataclasses import dataclass
from collections import Counter

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.logging import RichHandler
from rich.text import Text
from rich import box

from caesar_encode import ALPHABET_SIZE, CaesarError, caesar_encrypt, caesar_decrypt

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# ЛИНГВИСТИЧЕСКИЕ КОНСТАНТЫ
# ═══════════════════════════════════════════════════════════════════════════════

EN_ALPHA = 'abcdefghijklmnopqrstuvwxyz'
EN_SET   = frozenset(EN_ALPHA)

# Частоты букв английского языка (Cornell)
EN_LETTER_FREQ = {
    'e': 0.1270, 't': 0.0906, 'a': 0.0817, 'o': 0.0751, 'i': 0.0697,
    'n': 0.0675, 's': 0.0633, 'h': 0.0609, 'r': 0.0599, 'd': 0.0425,
    'l': 0.0403, 'c': 0.0278, 'u': 0.0276, 'm': 0.0241, 'w': 0.0236,
    'f': 0.0223, 'g': 0.0202, 'y': 0.0197, 'p': 0.0193, 'b': 0.0129,
    'v': 0.0098, 'k': 0.0077, 'j': 0.0015, 'x': 0.0015, 'q': 0.0010,
    'z': 0.0007,
}

EN_COMMON_BIGRAMS = frozenset({
    'th', 'he', 'in', 'er', 'an', 're', 'on', 'at', 'en', 'nd',
    'ti', 'es', 'or', 'te', 'of', 'ed', 'is', 'it', 'al', 'ar',
    'st', 'to', 'nt', 'ng', 'se', 'ha', 'as', 'ou', 'io', 'le',
    've', 'co', 'me', 'de', 'hi', 'ri', 'ro', 'ic', 'ne', 'ea',
    'ra', 'ce', 'li', 'ch', 'll', 'be', 'ma', 'si', 'om', 'ur',
    'ca', 'el', 'ta', 'la', 'ns', 'ge', 'ec', 'il', 'pe', 'ol',
    'no', 'na', 'us', 'di', 'wa', 'em', 'ac', 'ss', 'wo', 'lo',
})

EN_COMMON_WORDS = frozenset({
    'the', 'be', 'to', 'of', 'and', 'in', 'that', 'have', 'it', 'for',
    'not', 'on', 'with', 'he', 'as', 'you', 'do', 'at', 'this', 'but',
    'his', 'by', 'from', 'they', 'we', 'say', 'her', 'she', 'or', 'an',
    'will', 'my', 'one', 'all', 'would', 'there', 'their', 'what', 'so',
    'if', 'about', 'who', 'get', 'which', 'go', 'when', 'can', 'no',
    'is', 'are', 'was', 'were', 'been', 'had', 'has', 'me', 'him', 'them',
    'our', 'your', 'its', 'out', 'up', 'over', 'here', 'now', 'then', 'than',
    'hello', 'world', 'time', 'times', 'people', 'year', 'day', 'way', 'man',
})

# IC: английский ≈ 0.0667, случайный ≈ 0.0385
EN_IC_THRESHOLD = 0.055

_WORD_RE = re.compile(r'[a-zA-Z]{2,}')


# ═══════════════════════════════════════════════════════════════════════════════
# DATA CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ShiftResult:
    """Результат анализа одного сдвига"""
    shift: int
    text: str
    chi_sq: float          # Chi-squared (меньше = лучше)
    bigram_score: float    # Биграммная оценка [0..1]
    word_score: float      # Словарная оценка [0..1]
    combined: float        # Финальная оценка [0..1]
    matches: int           # Известных слов
    total_words: int       # Всего слов

    @property
    def confidence(self) -> float:
        return min(self.combined * 100, 100.0)


# ═══════════════════════════════════════════════════════════════════════════════
# СКОРЕРЫ
# ═══════════════════════════════════════════════════════════════════════════════

def _letters(text: str) -> List[str]:
    return [c for c in text.lower() if c in EN_SET]


def chi_squared(text: str) -> float:
    """
    Chi-squared тест: сравнение частоты букв с эталоном.
    Меньше = лучше.
    """
    letters = _letters(text)
    n = len(letters)
    if n == 0:
        return float('inf')

    observed = Counter(letters)
    chi_sq = 0.0
    for char, expected_freq in EN_LETTER_FREQ.items():
        expected = expected_freq * n
        chi_sq += (observed.get(char, 0) - expected) ** 2 / expected

    return chi_sq


def bigram_score(text: str) -> float:
    """Доля частых биграмм среди всех пар соседних букв."""
    letters = _letters(text)
    if len(letters) < 4:
        return 0.0

    bigrams = [letters[i] + letters[i+1] for i in range(len(letters) - 1)]
    hits = sum(1 for bg in bigrams if bg in EN_COMMON_BIGRAMS)
    return hits / len(bigrams)


def index_of_coincidence(text: str) -> float:
    letters = _letters(text)
    n = len(letters)
    if n < 2:
        return 0.0

    freq = Counter(letters)
    return sum(f * (f - 1) for f in freq.values()) / (n * (n - 1))


def extract_words(text: str) -> Tuple[str, ...]:
    return tuple(w.lower() for w in _WORD_RE.findall(text))


def word_score(text: str) -> Tuple[float, int, int]:
    """
    Доля известных слов: половина веса - по количеству,
    половина - по длине совпавших слов.
    """
    words = extract_words(text)
    if not words:
        return 0.0, 0, 0

    matches = 0
    match_weight = 0
    total_weight = 0
    for word in words:
        total_weight += len(word)
        if word in EN_COMMON_WORDS:
            matches += 1
            match_weight += len(word)

    ratio = matches / len(words)
    weighted = match_weight / total_weight
    return ratio * 0.5 + weighted * 0.5, matches, len(words)


# ═══════════════════════════════════════════════════════════════════════════════
# АНАЛИЗАТОР
# ═══════════════════════════════════════════════════════════════════════════════

class Analyzer:
    """
    Перебор всех 26 ключей с адаптивными весами.

    Длинный текст: chi-squared надёжен и доминирует.
    Короткий текст: chi-squared шумит, решают биграммы и слова.
    """

    def analyze_shift(self, text: str, shift: int) -> ShiftResult:
        """Полный анализ одного варианта сдвига"""
        decrypted = caesar_decrypt(text, shift)

        chi = chi_squared(decrypted)
        bg = bigram_score(decrypted)
        ws, matches, total = word_score(decrypted)
        combined = self._combine(chi, bg, ws, len(_letters(text)))

        return ShiftResult(
            shift=shift,
            text=decrypted,
            chi_sq=chi,
            bigram_score=bg,
            word_score=ws,
            combined=combined,
            matches=matches,
            total_words=total,
        )

    def _combine(self, chi: float, bg: float, ws: float, n_letters: int) -> float:
        # Типичный диапазон chi: 20-1000, инвертируем в [0..1]
        chi_norm = max(0.0, 1.0 - chi / 500.0)

        if n_letters >= 100:
            w_chi, w_bg, w_words = 0.45, 0.15, 0.40
        elif n_letters >= 30:
            w_chi, w_bg, w_words = 0.30, 0.25, 0.45
        elif n_letters >= 10:
            w_chi, w_bg, w_words = 0.15, 0.35, 0.50
        else:
            w_chi, w_bg, w_words = 0.05, 0.45, 0.50

        return w_chi * chi_norm + w_bg * bg + w_words * ws

    def brute_force(self, text: str) -> List[ShiftResult]:
        """Все 26 вариантов по порядку ключей"""
        return [self.analyze_shift(text, s) for s in range(ALPHABET_SIZE)]

    @staticmethod
    def rank(results: List[ShiftResult]) -> List[ShiftResult]:
        """Лучшие варианты первыми"""
        return sorted(results, key=lambda r: r.combined, reverse=True)

    def crack(self, text: str) -> List[ShiftResult]:
        """Перебирает все сдвиги, возвращает отсортированный список"""
        results = self.rank(self.brute_force(text))
        logger.debug("crack: лучший ключ %d (%.1f%%)", results[0].shift, results[0].confidence)
        return results

    def is_already_plaintext(self, text: str) -> bool:
        """Проверяет, не является ли текст уже открытым"""
        ws, matches, total = word_score(text)
        if total > 0 and matches / total >= 0.7:
            return True

        if len(_letters(text)) >= 30:
            return index_of_coincidence(text) > EN_IC_THRESHOLD and ws > 0.4

        return False


# ═══════════════════════════════════════════════════════════════════════════════
# UI (Rich)
# ═══════════════════════════════════════════════════════════════════════════════

class UI:
    def __init__(self):
        self.c = Console()

    def header(self):
        self.c.print(Panel(
            "[bold cyan]CAESAR[/bold cyan]\n"
            "[dim]Шифрование • Расшифровка • Chi² • Биграммы[/dim]",
            border_style="cyan", box=box.DOUBLE
        ))
        self.c.print()

    def result_shift(self, source: str, result: str, shift: int, decrypt: bool):
        title = "РАСШИФРОВАННЫЙ ТЕКСТ" if decrypt else "ЗАШИФРОВАННЫЙ ТЕКСТ"
        self.c.print(f"[dim]🔑 Ключ: [bold yellow]{shift}[/bold yellow]  "
                     f"Исходный: {len(source)} символов[/dim]")
        self.c.print()
        self.c.print(f"[bold green]💬 {title}:[/bold green]")
        self.c.print(result, markup=False)
        self.c.print()

    def result_crack(self, best: ShiftResult, top5: List[ShiftResult], is_plain: bool):
        if is_plain:
            self.c.print("[green]✓ Текст похож на открытый (не зашифрован)[/green]")
            self.c.print()

        self.c.print("[bold green]💬 РАСШИФРОВАННЫЙ ТЕКСТ:[/bold green]")
        self.c.print(best.text, markup=False)
        self.c.print()
        self.c.print(
            f"[dim]🔑 Ключ: [bold yellow]{best.shift}[/bold yellow]  "
            f"📊 {self._conf_colored(best.confidence)}  "
            f"📖 {best.matches}/{best.total_words} слов  "
            f"Chi²={best.chi_sq:.0f}  "
            f"Бигр.: {best.bigram_score:.0%}[/dim]"
        )
        self.c.print()

        t5 = Table(
            box=box.SIMPLE, show_header=True,
            header_style="bold", title="[bold]Альтернативы[/bold]"
        )
        t5.add_column("#", width=4)
        t5.add_column("Ключ", width=6)
        t5.add_column("Достов.", width=10)
        t5.add_column("Текст")

        for i, r in enumerate(top5, 1):
            marker = "⭐" if i == 1 else str(i)
            t5.add_row(marker, str(r.shift), self._conf_colored(r.confidence), self._preview(r.text))

        self.c.print(t5)

    def result_brute(self, results: List[ShiftResult], best_shift: int):
        tbl = Table(
            box=box.ROUNDED, show_header=True,
            header_style="bold magenta", title="[bold]Все ключи[/bold]"
        )
        tbl.add_column("Ключ", width=6, style="yellow")
        tbl.add_column("Достов.", width=10)
        tbl.add_column("Текст")

        for r in results:
            key = f"⭐ {r.shift}" if r.shift == best_shift else str(r.shift)
            tbl.add_row(key, self._conf_colored(r.confidence), self._preview(r.text))

        self.c.print(tbl)

    def error(self, message: str):
        self.c.print(f"[bold red]❌ {message}[/bold red]")

    @staticmethod
    def _preview(text: str, limit: int = 60) -> Text:
        # Text: без разбора разметки Rich
        return Text(text[:limit] + "…" if len(text) > limit else text)

    def _conf_colored(self, conf: float) -> str:
        if conf >= 80:
            return f"[bold green]{conf:.1f}%[/bold green]"
        elif conf >= 50:
            return f"[yellow]{conf:.1f}%[/yellow]"
        else:
            return f"[red]{conf:.1f}%[/red]"


# ═══════════════════════════════════════════════════════════════════════════════
# ПРИЛОЖЕНИЕ
# ═══════════════════════════════════════════════════════════════════════════════

def setup_logging(level=logging.WARNING):
    """Логи в stderr через Rich, чтобы не мешать выводу в stdout"""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog='caesar',
        description='Caesar — шифрование, расшифровка и взлом шифра Цезаря',
    )
    p.add_argument('text', nargs='*', help='Текст (иначе читается из stdin)')
    p.add_argument('-s', '--shift', type=int,
                   help='Ключ сдвига; без него текст взламывается перебором')
    p.add_argument('-d', '--decrypt', action='store_true',
                   help='Расшифровать ключом --shift вместо шифрования')
    p.add_argument('--brute', action='store_true',
                   help='Показать все 26 вариантов расшифровки')
    p.add_argument('-r', '--raw', action='store_true',
                   help='Вывести только текст результата (удобно для pipe)')
    p.add_argument('-v', '--verbose', action='store_true',
                   help='Подробные логи в stderr')
    args = p.parse_args(argv)
    if args.brute and args.shift is not None:
        p.error("--brute нельзя сочетать с --shift")
    return args


def _read_text(args: argparse.Namespace) -> str:
    if args.text:
        return ' '.join(args.text)
    if not sys.stdin.isatty():
        return sys.stdin.read().rstrip('\n')
    return ''


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    text = _read_text(args)
    if not text:
        print("Ошибка: передайте текст аргументом или через pipe", file=sys.stderr)
        return 1

    if args.decrypt and args.shift is None:
        print("Ошибка: для --decrypt нужен --shift", file=sys.stderr)
        return 1

    # --- С ключом: шифрование / расшифровка ---
    if args.shift is not None:
        if args.decrypt:
            result = caesar_decrypt(text, args.shift)
        else:
            result = caesar_encrypt(text, args.shift)

        if args.raw:
            print(result)
        else:
            ui = UI()
            ui.header()
            ui.result_shift(text, result, args.shift, args.decrypt)
        return 0

    # --- Без ключа: взлом ---
    analyzer = Analyzer()
    by_shift = analyzer.brute_force(text)
    results = analyzer.rank(by_shift)
    best = results[0]

    if args.raw:
        if args.brute:
            for r in by_shift:
                print(f"{r.shift}\t{r.text}")
        else:
            print(best.text)
        return 0

    ui = UI()
    ui.header()
    if args.brute:
        ui.result_brute(by_shift, best.shift)
    else:
        ui.result_crack(best, results[:5], analyzer.is_already_plaintext(text))
    return 0


def main():
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\n👋")
    except CaesarError as e:
        UI().error(str(e))
        sys.exit(1)
    except Exception as e:
        print(f"\n❌ {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
