"""
Core modules: frame decoding, accumulation, block extraction,
approval, execution and the pipeline that ties them together.
"""

from aicoder.core.frames import Frame, FrameDecoder, iter_frames
from aicoder.core.accumulator import GenerationOutcome, ResponseAccumulator
from aicoder.core.blocks import CodeBlock, extract_code_blocks
from aicoder.core.approval import ApprovalGate, ApprovalPolicy, ExecutionDecision
from aicoder.core.executor import CommandExecutor, ExecutionResult

__all__ = [
    "Frame",
    "FrameDecoder",
    "iter_frames",
    "GenerationOutcome",
    "ResponseAccumulator",
    "CodeBlock",
    "extract_code_blocks",
    "ApprovalGate",
    "ApprovalPolicy",
    "ExecutionDecision",
    "CommandExecutor",
    "ExecutionResult",
]
