"""
Note Board.

- engine/: Board state engine (notes, drag, layout, persistence, quotes)
"""
