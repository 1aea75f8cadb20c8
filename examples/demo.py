#!/usr/bin/env python3
"""
algebrix Feature Demonstration

This script walks through parsing, simplification, tracing, pattern
matching, rendering and evaluation.
"""

from pathlib import Path

import numpy as np

from algebrix import (
    Expression, FastFunction, Function, Operator,
    VariableBounds, like, parse_node, simplify, to_latex,
)
from algebrix.cli import load_custom_constants


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_simplification():
    """Demonstrate folding, identities and combining."""
    section("Simplification")

    examples = [
        "1 + 2 + 3",
        "5 - (-2)",
        "x + 0",
        "x + x",
        "2*x + x",
        "x + 5 - 5",
        "-(-x)",
        "x*x",
    ]

    for expr_str in examples:
        result = simplify(parse_node(expr_str))
        print(f"  {expr_str} => {result}")


def demo_factoring():
    """Demonstrate common factor extraction and cancellation."""
    section("Factoring and Cancellation")

    examples = [
        "2*x + 4",
        "2*x^2 + 4*x",
        "x^2 + x^3",
        "(x^2)/x",
        "(6*x^2)/(3*x)",
        "(2*x)/(2*x)",
    ]

    for expr_str in examples:
        result = simplify(parse_node(expr_str))
        print(f"  {expr_str} => {result}")


def demo_bounds():
    """Demonstrate bounds learned from divisions."""
    section("Variable Bounds")

    bounds = VariableBounds()
    result = simplify(parse_node("x*y/y"), bounds)
    print(f"  x*y/y => {result}   where {bounds}")


def demo_tracing():
    """Demonstrate rewrite tracing."""
    section("Rewrite Tracing")

    result, trace = simplify(parse_node("x*(y + y)"), trace=True)
    print(f"  Result: {result}")
    print(f"  Rules: {trace.format('rules')}")
    print("\n  Chain:")
    for line in trace.format("chain").splitlines():
        print(f"    {line}")
    print(f"\n  {trace.summary()}")


def demo_solving_step():
    """Demonstrate applying an operation to a whole expression."""
    section("Expression Operations")

    lhs = Expression.parse("x - 3")
    print(f"  lhs = {lhs}")
    lhs.add_op(Operator.ADD, "3").simplify()
    print(f"  lhs + 3 => {lhs}")

    rhs = Expression.parse("2*x")
    rhs.add_op(Operator.DIVIDE, "2").simplify()
    print(f"  (2*x)/2 => {rhs}")


def demo_patterns():
    """Demonstrate structural pattern matching."""
    section("Pattern Matching")

    examples = [
        ("2^3*2^4", "x^m*x^n"),
        ("(x + 2)^2", "(a + b)^2"),
        ("2^3*3^4", "x^m*x^n"),
    ]

    for expr_str, template in examples:
        bindings = like(parse_node(expr_str), template)
        print(f"  {expr_str} like {template}: {bindings}")


def demo_latex():
    """Demonstrate LaTeX output."""
    section("LaTeX Output")

    for expr_str in ["x^2/(x+1)", "pi*r^2", "(a+b)*c"]:
        print(f"  {expr_str} => {to_latex(parse_node(expr_str))}")


def demo_evaluation():
    """Demonstrate exact and compiled evaluation."""
    section("Evaluation")

    f = Function("x^x")
    for value in (3, -2):
        print(f"  x^x at {value} = {f(value)}")
    try:
        f(-40)
    except OverflowError as e:
        print(f"  x^x at -40: {e}")

    g = FastFunction("x^2 + 1")
    xs = np.linspace(0.0, 2.0, 5)
    print(f"\n  {g.simplified} compiled to {len(g.instructions)} instructions")
    print(f"  over {xs}: {g(xs)}")

    physics = load_custom_constants(str(Path(__file__).parent / "physics.py"))
    energy = Function("m*c^2", constants=physics)
    print(f"\n  m*c^2 at m=2: {energy(m=2)}")


def main():
    """Run all demonstrations."""
    print("algebrix - symbolic simplification of algebraic expressions")
    print("Feature Demonstration")

    demo_simplification()
    demo_factoring()
    demo_bounds()
    demo_tracing()
    demo_solving_step()
    demo_patterns()
    demo_latex()
    demo_evaluation()

    print("\n" + "="*60)
    print(" Demo complete!")
    print("="*60)


if __name__ == "__main__":
    main()
