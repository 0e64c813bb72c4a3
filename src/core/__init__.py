"""
Core: кривые распределений, математические примитивы и контракты.

Операции над кривыми детерминированы и не выполняют I/O; контракты
читают JSON Schema из src/core/contracts/schema/ (package data).
"""
