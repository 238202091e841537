"""
Settings for test discovery and execution.

`TesterSettings` holds the few knobs the framework exposes. Defaults match
the behavior documented for the registration API; the command line
overrides individual fields.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from expecttree.checks import DEFAULT_EPSILON


class TesterSettings(BaseModel):
    """Configuration for a `Tester` run.

    Params:
        fuzzy_epsilon: Default tolerance of `to_fuzzy_equal` / `to_not_fuzzy_equal`
        test_suffix: File name suffix identifying test modules during discovery
        entry_point: Module-level callable invoked as the test module body
    """

    __test__: ClassVar[bool] = False

    model_config = ConfigDict(frozen=True)

    fuzzy_epsilon: float = Field(default=DEFAULT_EPSILON, gt=0)
    test_suffix: str = Field(default=".test.py", min_length=1)
    entry_point: str = Field(default="run", min_length=1)
