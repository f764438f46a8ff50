#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Шифровальщик текста шифром Цезаря (латиница A-Z / a-z)"""

import sys
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

ALPHABET_SIZE = 26
UPPER_BASE = ord('A')  # 65
LOWER_BASE = ord('a')  # 97


# ═══════════════════════════════════════════════════════════════════════════════
# ОШИБКИ
# ═══════════════════════════════════════════════════════════════════════════════

class CaesarError(Exception):
    """Неверный вызов шифра"""


class MissingShift(CaesarError):
    def __init__(self):
        super().__init__("Не задан сдвиг (shift)")


class InvalidTextType(CaesarError, TypeError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Текст должен быть строкой, получено {type(value).__name__}")


class InvalidShiftType(CaesarError, TypeError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Сдвиг должен быть целым числом, получено {type(value).__name__}")


# ═══════════════════════════════════════════════════════════════════════════════
# ШИФР
# ═══════════════════════════════════════════════════════════════════════════════

def wrap(offset: int, shift: int, size: int = ALPHABET_SIZE) -> int:
    """Позиция буквы после сдвига по кругу, всегда в [0, size).

    В Python `%` с положительным делителем даёт неотрицательный остаток,
    поэтому отрицательные и большие сдвиги заворачиваются корректно.
    """
    return (offset + shift) % size


def shift_char(char: str, shift: int) -> str:
    code = ord(char)
    if UPPER_BASE <= code < UPPER_BASE + ALPHABET_SIZE:
        return chr(UPPER_BASE + wrap(code - UPPER_BASE, shift))
    if LOWER_BASE <= code < LOWER_BASE + ALPHABET_SIZE:
        return chr(LOWER_BASE + wrap(code - LOWER_BASE, shift))
    # Цифры, пунктуация, пробелы, кириллица - без изменений
    return char


def validate(text, shift) -> None:
    """Проверка аргументов до начала шифрования"""
    if shift is None:
        raise MissingShift()
    if not isinstance(text, str):
        raise InvalidTextType(text)
    # bool - подкласс int, но сдвигом не является
    if isinstance(shift, bool) or not isinstance(shift, int):
        raise InvalidShiftType(shift)


def caesar_encrypt(text: str, shift: Optional[int] = None) -> str:
    """Шифрует текст шифром Цезаря"""
    validate(text, shift)
    logger.debug("encrypt: %d символов, сдвиг %d", len(text), shift)

    result = []
    for char in text:
        result.append(shift_char(char, shift))

    return ''.join(result)


def caesar_decrypt(text: str, shift: Optional[int] = None) -> str:
    """Расшифровывает текст, зашифрованный со сдвигом `shift`"""
    validate(text, shift)
    return caesar_encrypt(text, -shift)


def rot13(text: str) -> str:
    return caesar_encrypt(text, 13)


def main(argv: Optional[List[str]] = None) -> int:
    """python3 caesar_encode.py <ключ> <текст>"""
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 2:
        print("Использование: python3 caesar_encode.py <ключ> <текст>")
        print("Пример: python3 caesar_encode.py 3 'Hello, World!'")
        return 1

    try:
        key = int(args[0])
    except ValueError:
        print("❌ Ошибка: ключ должен быть числом")
        return 1

    text = ' '.join(args[1:])
    encrypted = caesar_encrypt(text, key)

    print(f"Ключ: {key}")
    print(f"Исходный текст: {text}")
    print(f"Зашифрованный: {encrypted}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
