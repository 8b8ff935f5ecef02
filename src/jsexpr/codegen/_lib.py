"""Declarations of the built-in types that surrogates know about.

Only the names matter: `Array` references become `ArrayExpr`, `Number`
becomes `NumberExpr`, and so on. Any other unresolved name is treated as
`any`.
"""

LIB_PATH = "<lib>"

LIB_SOURCE = """
interface Array<T> {
    length: number;
}

interface Boolean {}
interface Number {}
interface String {}
interface Function {}
interface Date {}
interface Element {}
interface KeyboardEvent {}
"""
