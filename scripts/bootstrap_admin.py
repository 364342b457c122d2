import os

from academia.core.backends import get_identity


def main() -> None:
    email = os.getenv("ADMIN_BOOTSTRAP_EMAIL")
    uid = os.getenv("ADMIN_BOOTSTRAP_UID")
    if not email and not uid:
        raise SystemExit("ADMIN_BOOTSTRAP_EMAIL ou ADMIN_BOOTSTRAP_UID nao definido.")

    identity = get_identity()
    if not uid:
        account = identity.get_account_by_email(email.strip().lower())
        if account is None:
            raise SystemExit(f"Conta nao encontrada: {email}")
        uid = account.uid
    identity.set_claims(uid, {"admin": True})
    print(f"Admin ativo: {uid}")


if __name__ == "__main__":
    main()
