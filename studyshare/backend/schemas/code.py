"""
Code Schemas.

Request and response bodies for the playground, saved codes and snippets.
Request fields are optional; the services decide what is required.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class RunCodeRequest(_Payload):
    language: str | None = Field(default=None, examples=["python"])
    code: str | None = Field(default=None, examples=["print('hi')"])
    stdin: str | None = None


class RunCodeResponse(BaseModel):
    stdout: str | None = None
    stderr: str | None = None
    compile_output: str | None = None
    status: dict | None = None


class SaveCodeRequest(_Payload):
    title: str | None = None
    language: str | None = None
    code: str | None = None


class SnippetSaveRequest(_Payload):
    name: str | None = None
    language: str | None = None
    code: str | None = None


class SnippetSaveResponse(BaseModel):
    success: bool = True
    link: str | None = None
