"""
Stack Frame Model
=================
One parsed stack-trace entry. Lists of frames keep the trace's own order
(top frame first).
"""
from typing import Optional

from pydantic import BaseModel, Field


class StackFrame(BaseModel):
    file_name: str
    line_number: int = Field(ge=1)
    function_name: str
    class_name: Optional[str] = None
