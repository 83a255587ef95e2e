import os

from pydantic import BaseModel

INTERPRETER_ENV = "PYEXPAND_INTERPRETER"
TEMP_FILE_ENV = "PYEXPAND_TEMP_FILE"

DEFAULT_INTERPRETER = "py"
DEFAULT_TEMP_FILE = "__pyexpand_temp.py"


class Settings(BaseModel):
    interpreter: str = DEFAULT_INTERPRETER
    temp_file: str = DEFAULT_TEMP_FILE


def get_settings() -> Settings:
    return Settings(
        interpreter=os.getenv(INTERPRETER_ENV) or DEFAULT_INTERPRETER,
        temp_file=os.getenv(TEMP_FILE_ENV) or DEFAULT_TEMP_FILE,
    )
