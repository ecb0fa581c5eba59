"""Core timeline model and transforms.

WHY: Everything between "raw recognition spans" and "a list ready to
serialize" lives here: the IR, the frame-rate table, time conversion, and
the refine → dedup → merge → align stages.

HOW: ir.py defines the data types, frame_rates.py and timecode.py do the
time arithmetic, refiner.py / dedup.py / merger.py / aligner.py are the
pipeline stages, each a pure synchronous transform.

RULES:
- No I/O in this package
- Stages hand copies forward; nothing mutates a list owned by another stage
"""
