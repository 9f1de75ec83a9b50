#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Выпуск JWT для администратора или студента.

Вход и учётные записи живут у внешнего провайдера; этот скрипт нужен
для локального запуска и интеграции.

Пример:
    python scripts/issue_token.py admin admin-1
    python scripts/issue_token.py student 4f0c... --minutes 240
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from nmt_exam.domain.enums import Role  # noqa: E402
from nmt_exam.security.security import create_access_token  # noqa: E402


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Выпустить access-токен NMT Exam")
    parser.add_argument("role", choices=[r.value for r in Role])
    parser.add_argument("subject", help="ID пользователя (claim sub)")
    parser.add_argument(
        "--minutes", type=int, default=None, help="Срок действия токена, минуты"
    )
    args = parser.parse_args(argv)

    expires = timedelta(minutes=args.minutes) if args.minutes else None
    token = create_access_token({"sub": args.subject, "role": args.role}, expires)
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
