"""Template bodies for the built-in catalogue — separated from lookup logic.

Inline templates stick to the standard library; sandbox templates may use the
preloaded numpy / matplotlib and the ``show_plot()`` helper.
"""

from __future__ import annotations

from playground.catalogue.catalogue import TemplateEntry
from playground.state.schema import Language

NATIVE = Language.NATIVE
SANDBOXED = Language.SANDBOXED

# ── Default Templates ─────────────────────────────────────────────────────────

DEFAULT_NATIVE = '''# Welcome to the StudyHub Coding Playground!
# This code runs inline: print() goes to the output panel,
# print(..., file=sys.stderr) shows as an error, warnings.warn() as a warning.

print("Hello, StudyHub!")

# 1. Variables and functions
def greet_student(name):
    return f"Welcome to StudyHub, {name}!"

print(greet_student("Student"))

# 2. Lists and loops
subjects = ["Math", "Science", "Programming"]
for subject in subjects:
    print(f"Studying: {subject}")

# 3. Simple calculation
def calculate_grade(score, total):
    percentage = (score / total) * 100
    return f"Grade: {percentage:.1f}%"

print(calculate_grade(85, 100))'''

DEFAULT_SANDBOXED = '''# Welcome to the StudyHub Python Sandbox!
# numpy and matplotlib are preloaded; print(show_plot()) renders a figure.

print("Hello, StudyHub!")

# 1. Variables and functions
def greet_student(name):
    return f"Welcome to StudyHub, {name}!"

print(greet_student("Student"))

# 2. List comprehension
squares = [x**2 for x in range(1, 6)]
print(f"Squares: {squares}")

# 3. Working with dictionaries
student_grades = {
    "Math": 92,
    "Science": 88,
    "Programming": 95
}

for subject, grade in student_grades.items():
    print(f"{subject}: {grade}%")

# 4. numpy
import numpy as np
scores = np.array(list(student_grades.values()))
print(f"Average: {scores.mean():.1f}")'''

DEFAULT_TEMPLATES = {
    NATIVE: DEFAULT_NATIVE,
    SANDBOXED: DEFAULT_SANDBOXED,
}

# ── Challenges ────────────────────────────────────────────────────────────────

FIZZBUZZ = '''# FizzBuzz Challenge
# Print numbers 1-100 with the following rules:
# - Multiples of 3: print "Fizz"
# - Multiples of 5: print "Buzz"
# - Multiples of both 3 and 5: print "FizzBuzz"
# - All other numbers: print the number

for i in range(1, 101):
    # Your code here
    pass'''

FIZZBUZZ_SANDBOXED = '''# FizzBuzz Challenge (sandbox edition)
# Same rules as the classic, but build the answers first and print them once:
# - Multiples of 3: "Fizz"
# - Multiples of 5: "Buzz"
# - Multiples of both 3 and 5: "FizzBuzz"
# - All other numbers: the number

def fizzbuzz(n):
    # Your code here
    return str(n)

print("\\n".join(fizzbuzz(i) for i in range(1, 101)))'''

PALINDROME = '''# Palindrome Checker
# Write a function that returns True if a string is a palindrome
# (reads the same forwards and backwards)
# Ignore spaces, punctuation, and case

def is_palindrome(s):
    # Your code here
    pass

# Test cases
print(is_palindrome("racecar"))  # should return True
print(is_palindrome("A man a plan a canal Panama"))  # should return True
print(is_palindrome("race a car"))  # should return False
print(is_palindrome("hello"))  # should return False'''

SORTING = '''# Sorting Algorithms
# Implement bubble sort and quick sort algorithms

def bubble_sort(arr):
    # Your bubble sort implementation here
    pass

def quick_sort(arr):
    # Your quick sort implementation here
    pass

# Test with sample data
test_array = [64, 34, 25, 12, 22, 11, 90]
print("Original array:", test_array)

# Test bubble sort
bubbled = bubble_sort(test_array.copy())
print("Bubble sorted:", bubbled)

# Test quick sort
quick_sorted = quick_sort(test_array.copy())
print("Quick sorted:", quick_sorted)'''

SORTING_SANDBOXED = SORTING + '''

# Compare against numpy
import numpy as np
print("numpy sorted:", np.sort(test_array).tolist())'''

CALCULATOR = '''# Simple Calculator
# Build a calculator that can perform basic arithmetic operations
# Include proper error handling for division by zero

class Calculator:
    def add(self, a, b):
        # Your implementation here
        pass

    def subtract(self, a, b):
        # Your implementation here
        pass

    def multiply(self, a, b):
        # Your implementation here
        pass

    def divide(self, a, b):
        # Your implementation here
        # Remember to handle division by zero!
        pass

    def calculate(self, expression):
        # Parse and evaluate expressions like "2 + 3 * 4"
        # Your implementation here
        pass

# Test your calculator
calc = Calculator()
print("5 + 3 =", calc.add(5, 3))
print("10 - 4 =", calc.subtract(10, 4))
print("6 * 7 =", calc.multiply(6, 7))
print("15 / 3 =", calc.divide(15, 3))
print("10 / 0 =", calc.divide(10, 0))  # Should handle error gracefully'''

TREE = '''# Binary Tree Traversal
# Implement inorder, preorder, and postorder traversal

class TreeNode:
    def __init__(self, val=0, left=None, right=None):
        self.val = val
        self.left = left
        self.right = right

class BinaryTree:
    def __init__(self, root=None):
        self.root = root

    def inorder_traversal(self, node=None):
        # Left, Root, Right
        # Your implementation here
        if node is None:
            node = self.root
        pass

    def preorder_traversal(self, node=None):
        # Root, Left, Right
        # Your implementation here
        if node is None:
            node = self.root
        pass

    def postorder_traversal(self, node=None):
        # Left, Right, Root
        # Your implementation here
        if node is None:
            node = self.root
        pass

# Create a sample tree:    1
#                        /   \\
#                       2     3
#                      / \\
#                     4   5

tree = BinaryTree(
    TreeNode(1,
        TreeNode(2,
            TreeNode(4),
            TreeNode(5)
        ),
        TreeNode(3)
    )
)

print("Inorder:", tree.inorder_traversal())
print("Preorder:", tree.preorder_traversal())
print("Postorder:", tree.postorder_traversal())'''

NQUEENS = '''# N-Queens Problem
# Place N queens on an NxN chessboard so that no two queens attack each other

class NQueens:
    def __init__(self, n):
        self.n = n
        self.board = [[0 for _ in range(n)] for _ in range(n)]
        self.solutions = []

    def is_safe(self, row, col):
        # Check if placing a queen at (row, col) is safe
        # Your implementation here
        pass

    def solve(self, row=0):
        # Use backtracking to find all solutions
        # Your implementation here
        pass

    def print_board(self):
        # Print the current board state
        for row in self.board:
            print(' '.join('Q' if cell else '.' for cell in row))
        print('---')

# Solve for 4 queens (classic example)
n_queens = NQueens(4)
print("Solving 4-Queens problem...")
n_queens.solve()
print(f"Found {len(n_queens.solutions)} solution(s)")'''

CHALLENGES = (
    TemplateEntry(
        id="fizzbuzz",
        title="FizzBuzz Classic",
        description=(
            'Print numbers 1-100, but for multiples of 3 print "Fizz", multiples of 5 '
            'print "Buzz", and multiples of both print "FizzBuzz".'
        ),
        templates={NATIVE: FIZZBUZZ, SANDBOXED: FIZZBUZZ_SANDBOXED},
    ),
    TemplateEntry(
        id="palindrome",
        title="Palindrome Check",
        description=(
            "Write a function that checks if a word reads the same backward as "
            "forward, ignoring spaces and case."
        ),
        templates={NATIVE: PALINDROME, SANDBOXED: PALINDROME},
    ),
    TemplateEntry(
        id="sorting",
        title="Array Sorter",
        description="Implement different sorting algorithms and compare their results.",
        templates={NATIVE: SORTING, SANDBOXED: SORTING_SANDBOXED},
    ),
    TemplateEntry(
        id="calculator",
        title="Calculator App",
        description=(
            "Build a simple calculator that can perform basic arithmetic operations "
            "with proper error handling."
        ),
        templates={NATIVE: CALCULATOR, SANDBOXED: CALCULATOR},
    ),
    TemplateEntry(
        id="tree",
        title="Binary Tree Traversal",
        description="Implement and visualize different tree traversal methods.",
        templates={NATIVE: TREE, SANDBOXED: TREE},
    ),
    TemplateEntry(
        id="nqueens",
        title="N-Queens Problem",
        description="Solve the classic N-Queens problem using a backtracking algorithm.",
        templates={NATIVE: NQUEENS, SANDBOXED: NQUEENS},
    ),
)

# ── Snippets ──────────────────────────────────────────────────────────────────

LIST_METHODS = '''# Python List Methods Cheat Sheet

fruits = ['apple', 'banana', 'orange', 'grape']
numbers = [1, 2, 3, 4, 5]

# Adding/Removing elements
print('=== Adding/Removing ===')
fruits.append('mango')          # Add to end
print('After append:', fruits)

fruits.insert(0, 'strawberry')  # Add to beginning
print('After insert:', fruits)

last_fruit = fruits.pop()       # Remove from end
print('Popped:', last_fruit)

first_fruit = fruits.pop(0)     # Remove from beginning
print('Popped first:', first_fruit)

# Transformation
print('=== Transformation ===')
doubled = [n * 2 for n in numbers]
print('Doubled:', doubled)

even_numbers = [n for n in numbers if n % 2 == 0]
print('Even numbers:', even_numbers)

print('Sum:', sum(numbers))
print('Sorted desc:', sorted(numbers, reverse=True))'''

LIST_COMPREHENSIONS = '''# Python List Comprehensions - Quick Guide

# 1. Basic form
squares = [x**2 for x in range(10)]
print("Squares:", squares)

# 2. With a condition
evens = [x for x in range(20) if x % 2 == 0]
print("Evens:", evens)

# 3. Conditional expression
labels = ["even" if x % 2 == 0 else "odd" for x in range(5)]
print("Labels:", labels)

# 4. Nested loops
pairs = [(x, y) for x in range(3) for y in range(2)]
print("Pairs:", pairs)

# 5. Dict and set comprehensions
lengths = {word: len(word) for word in ["python", "study", "hub"]}
print("Lengths:", lengths)
unique = {x % 3 for x in range(10)}
print("Unique remainders:", sorted(unique))

# 6. Keep them readable
def process_number(x):
    if x % 2 == 0:
        return x**2
    elif x % 3 == 0:
        return x**3
    return x

print("Processed:", [process_number(x) for x in range(6, 12)])'''

OUTPUT_CHANNELS = '''# Output channels in the inline playground

import sys
import warnings

print("print() writes a normal log line")
print({"structured": True, "values": [1, 2, 3]})  # containers show as indented JSON
print("print(..., file=sys.stderr) shows up as an error line", file=sys.stderr)
warnings.warn("warnings.warn() shows up as a warning line")

# A final expression is reported only when nothing was printed'''

ASYNC_AWAIT = '''# Async/Await Examples in Python

import asyncio

async def fetch_grade(subject, delay):
    await asyncio.sleep(delay)
    return f"{subject}: done after {delay}s"

async def main():
    # Sequential
    first = await fetch_grade("Math", 0.1)
    print(first)

    # Concurrent
    results = await asyncio.gather(
        fetch_grade("Science", 0.2),
        fetch_grade("Programming", 0.1),
    )
    for result in results:
        print(result)

    # Error handling
    try:
        await asyncio.wait_for(fetch_grade("History", 1), timeout=0.1)
    except asyncio.TimeoutError:
        print("History took too long")

asyncio.run(main())'''

PLOTTING = '''# Plotting with matplotlib
# show_plot() returns the current figure as an image for the output panel

import numpy as np
import matplotlib.pyplot as plt

x = np.linspace(0, 2 * np.pi, 200)
plt.plot(x, np.sin(x), label="sin")
plt.plot(x, np.cos(x), label="cos")
plt.title("Trigonometry")
plt.legend()

print(show_plot())'''

SNIPPETS = (
    TemplateEntry(
        id="list-methods",
        title="List Methods",
        templates={NATIVE: LIST_METHODS, SANDBOXED: LIST_METHODS},
    ),
    TemplateEntry(
        id="list-comprehensions",
        title="List Comprehensions",
        templates={NATIVE: LIST_COMPREHENSIONS, SANDBOXED: LIST_COMPREHENSIONS},
    ),
    TemplateEntry(
        id="output-channels",
        title="Output Channels",
        templates={NATIVE: OUTPUT_CHANNELS},
    ),
    TemplateEntry(
        id="async-await",
        title="Async/Await",
        templates={SANDBOXED: ASYNC_AWAIT},
    ),
    TemplateEntry(
        id="plotting",
        title="Plotting",
        templates={SANDBOXED: PLOTTING},
    ),
)
