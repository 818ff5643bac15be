from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class LoginImage(BaseModel):
    image_url: Optional[str] = None
