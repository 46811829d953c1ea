"""
End-to-end compilation.

Exports:
    compile_motion_graph: Manifest -> graph + patches -> output sink
    CompilationResult: Outcome of one run
"""

from src.compiler.compiler import CompilationResult, compile_motion_graph

__all__ = ["CompilationResult", "compile_motion_graph"]
