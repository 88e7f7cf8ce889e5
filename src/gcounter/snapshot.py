"""
Pydantic model for the dictionary snapshot of a G-Counter.
"""

from typing import Dict, Hashable, Literal, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, field_validator


class GCounterSnapshot(BaseModel):
    type: Literal['GCounter'] = 'GCounter'
    # replica ids are opaque; counts are strict so bools are never read as 1
    counts: Dict[Hashable, Union[StrictInt, StrictFloat]] = Field(default_factory=dict)

    @field_validator('counts')
    @classmethod
    def counts_non_negative(cls, counts):
        negative = {replica: count for replica, count in counts.items() if count < 0}
        if negative:
            raise ValueError(f"Counts can never be negative: {negative}")
        return counts
