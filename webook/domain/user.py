"""Domain view of an account, independent of storage and transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass
class WechatInfo:
    open_id: str = ""
    union_id: str = ""


@dataclass
class User:
    id: int = 0
    email: str = ""
    password: str = ""
    nickname: str = ""
    birthday: Optional[date] = None
    about_me: str = ""
    phone: str = ""
    wechat_info: WechatInfo = field(default_factory=WechatInfo)
    ctime: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "nickname": self.nickname,
            "birthday": self.birthday.isoformat() if self.birthday else None,
            "about_me": self.about_me,
            "phone": self.phone,
            "wechat_info": {
                "open_id": self.wechat_info.open_id,
                "union_id": self.wechat_info.union_id,
            },
            "ctime": self.ctime.isoformat() if self.ctime else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        birthday = data.get("birthday")
        ctime = data.get("ctime")
        wechat = data.get("wechat_info") or {}
        return cls(
            id=int(data.get("id") or 0),
            email=data.get("email") or "",
            password=data.get("password") or "",
            nickname=data.get("nickname") or "",
            birthday=date.fromisoformat(birthday) if birthday else None,
            about_me=data.get("about_me") or "",
            phone=data.get("phone") or "",
            wechat_info=WechatInfo(
                open_id=wechat.get("open_id") or "",
                union_id=wechat.get("union_id") or "",
            ),
            ctime=datetime.fromisoformat(ctime) if ctime else None,
        )
