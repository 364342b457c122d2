import logging
import re
from typing import Any, Optional

from academia.core.clock import now_iso
from academia.core.errors import ConflictError, NotFoundError, ValidationError
from academia.services.identity import AccountExistsError, IdentityProvider
from academia.services.saga import Saga, SagaReport
from academia.store import paths
from academia.store.base import Document, DocumentStore

logger = logging.getLogger("academia.clients")

CLIENT_ROLE = "cliente"
REQUIRED_ON_CREATE = ("nome", "email", "cpf", "celular", "dataNascimento")


def clean_cpf(value: Any) -> str:
    if not value or not isinstance(value, str):
        raise ValidationError("CPF e obrigatorio e deve ser uma string.")
    digits = re.sub(r"\D", "", value)
    if len(digits) != 11:
        raise ValidationError("CPF deve ter 11 digitos numericos.")
    return digits


def normalize_email(value: Any) -> str:
    if not value or not isinstance(value, str) or "@" not in value:
        raise ValidationError("Email e obrigatorio e deve ter formato valido.")
    return value.strip().lower()


def clean_plan(plano: dict) -> dict:
    nome = plano.get("nome")
    valor = plano.get("valor")
    periodo = plano.get("periodo")
    if not nome or not isinstance(nome, str):
        raise ValidationError("O campo plano.nome e obrigatorio e deve ser uma string.")
    if isinstance(valor, bool) or not isinstance(valor, (int, float)):
        raise ValidationError("O campo plano.valor e obrigatorio e deve ser um numero.")
    if isinstance(periodo, bool) or not isinstance(periodo, (int, float)):
        raise ValidationError("O campo plano.periodo e obrigatorio e deve ser um numero.")
    return {"nome": nome.strip(), "valor": valor, "periodo": periodo}


def _required_text(data: dict, name: str, message: str, min_length: int = 1) -> str:
    value = data.get(name)
    if not isinstance(value, str) or len(value.strip()) < min_length:
        raise ValidationError(message)
    return value.strip()


class ClientService:
    """Client record fan-out: canonical record, admin mirror and both email indexes."""

    def __init__(self, store: DocumentStore, identity: IdentityProvider) -> None:
        self.store = store
        self.identity = identity

    def _find(self, cpf: str) -> Optional[Document]:
        return self.store.get(paths.admin_clients().doc(cpf)) or self.store.get(paths.clients().doc(cpf))

    def list(self) -> list[dict]:
        docs = self.store.query(paths.admin_clients(), order_by=("criadoEm", "desc"))
        clientes = []
        for doc in docs:
            data = doc.data
            if not (data.get("nome") and data.get("email") and data.get("cpf")):
                continue
            clientes.append(
                {
                    **data,
                    "id": doc.id,
                    "uid": data.get("uid") or "",
                    "celular": data.get("celular") or "",
                    "dataNascimento": data.get("dataNascimento") or "",
                    "dataPagamento": data.get("dataPagamento") or "",
                    "ativo": data.get("ativo", True),
                    "status": data.get("status") or "ativo",
                    "plano": data.get("plano"),
                }
            )
        return clientes

    def get(self, cpf: str) -> dict:
        doc = self._find(clean_cpf(cpf))
        if doc is None:
            raise NotFoundError("Cliente nao encontrado.")
        return doc.to_dict()

    def create(self, data: dict) -> tuple[dict, SagaReport]:
        for name in REQUIRED_ON_CREATE:
            if not data.get(name):
                raise ValidationError("Todos os campos sao obrigatorios.")
        cpf = clean_cpf(data["cpf"])
        email = normalize_email(data["email"])
        nome = data["nome"].strip()

        if self.store.get(paths.clients().doc(cpf)) or self.store.get(paths.admin_clients().doc(cpf)):
            raise ConflictError("CPF ja esta cadastrado no sistema.")
        if self.store.get(paths.email_index().doc(email)) or self.store.get(paths.admin_email_index().doc(email)):
            raise ConflictError("E-mail ja esta em uso.")

        existing = self.identity.get_account_by_email(email)
        if existing is not None:
            if existing.claims.get("role") != CLIENT_ROLE:
                raise AccountExistsError()
            # Leftover account of a client whose records are gone; recreate it.
            logger.warning("conta orfa encontrada para %s, recriando", email)
            self.identity.delete_account(existing.uid)

        stamp = now_iso()
        record = {
            "nome": nome,
            "email": email,
            "cpf": cpf,
            "celular": data["celular"].strip(),
            "dataNascimento": data["dataNascimento"],
            "dataPagamento": (data.get("dataPagamento") or "").strip(),
            "plano": clean_plan(data["plano"]) if isinstance(data.get("plano"), dict) else None,
            "ativo": True,
            "status": "ativo",
            "criadoEm": stamp,
            "atualizadoEm": stamp,
        }
        index_record = {"cpf": cpf, "nome": nome, "criadoEm": stamp}
        created: dict = {}

        def create_account():
            created["uid"] = self.identity.create_account(email, cpf, nome)
            record["uid"] = created["uid"]
            index_record["uid"] = created["uid"]

        targets = [
            ("clientes", paths.clients().doc(cpf), record),
            ("indices.emails", paths.email_index().doc(email), index_record),
            ("admin.clientes", paths.admin_clients().doc(cpf), record),
            ("admin.indices.emails", paths.admin_email_index().doc(email), index_record),
        ]
        saga = Saga("cliente.criar")
        saga.add_step("identidade.conta", create_account, lambda: self.identity.delete_account(created["uid"]))
        for name, path, payload in targets:
            saga.add_step(
                name,
                lambda path=path, payload=payload: self.store.set(path, payload),
                lambda path=path: self.store.delete(path),
            )
        saga.add_step(
            "identidade.claims",
            lambda: self.identity.set_claims(created["uid"], {"role": CLIENT_ROLE, "cpf": cpf}),
        )
        report = saga.run()
        logger.info("cliente criado cpf=%s email=%s", cpf, email)
        return {"uid": created["uid"], "clienteId": cpf}, report

    def delete(self, cpf: str) -> tuple[dict, SagaReport]:
        cpf = clean_cpf(cpf)
        doc = self.store.get(paths.clients().doc(cpf)) or self.store.get(paths.admin_clients().doc(cpf))
        if doc is None:
            raise NotFoundError("Cliente nao encontrado.")
        uid = doc.data.get("uid")
        email = (doc.data.get("email") or "").strip().lower()

        saga = Saga("cliente.excluir")
        if uid:
            saga.add_step("identidade.conta", lambda: self.identity.delete_account(uid), required=False)
        saga.add_step("clientes", lambda: self.store.delete(paths.clients().doc(cpf)))
        saga.add_step("admin.clientes", lambda: self.store.delete(paths.admin_clients().doc(cpf)), required=False)
        if email:
            saga.add_step(
                "admin.indices.emails",
                lambda: self.store.delete(paths.admin_email_index().doc(email)),
                required=False,
            )
            saga.add_step(
                "indices.emails",
                lambda: self.store.delete(paths.email_index().doc(email)),
                required=False,
            )
        report = saga.run()
        logger.info("cliente excluido cpf=%s falhas=%s", cpf, report.failed_steps)
        return {"cpf": cpf, "nome": doc.data.get("nome"), "email": email}, report

    def update(self, cpf: str, tipo: str, data: dict) -> tuple[dict, SagaReport]:
        if tipo not in ("completa", "status"):
            raise ValidationError('Tipo de operacao deve ser "completa" ou "status".')
        cpf = clean_cpf(cpf)
        current_doc = self._find(cpf)
        if current_doc is None:
            raise NotFoundError("Cliente nao encontrado.")
        current = current_doc.data
        uid = current.get("uid")
        old_email = (current.get("email") or "").strip().lower()
        changes: dict = {"atualizadoEm": now_iso()}
        new_email = old_email

        if tipo == "status":
            ativo = data.get("ativo")
            if not isinstance(ativo, bool):
                raise ValidationError('Para alteracao de status, o campo "ativo" deve ser um boolean.')
            changes.update({"ativo": ativo, "status": "ativo" if ativo else "inativo"})
        else:
            nome = _required_text(data, "nome", "Nome e obrigatorio e deve ter pelo menos 2 caracteres.", 2)
            new_email = normalize_email(data.get("email"))
            changes.update(
                {
                    "nome": nome,
                    "email": new_email,
                    "celular": _required_text(data, "celular", "Celular e obrigatorio."),
                    "dataPagamento": _required_text(data, "dataPagamento", "dataPagamento e obrigatorio."),
                    "dataNascimento": _required_text(data, "dataNascimento", "Data de nascimento e obrigatoria."),
                }
            )
            if isinstance(data.get("plano"), dict):
                changes["plano"] = clean_plan(data["plano"])
            if new_email != old_email:
                owner = self.store.get(paths.admin_email_index().doc(new_email))
                if owner is not None and owner.data.get("cpf") != cpf:
                    raise ConflictError("Este email ja esta sendo usado por outro cliente.")

        mirror = paths.admin_clients().doc(cpf)
        # A missing mirror is rebuilt from the canonical record.
        mirror_changes = changes if self.store.get(mirror) is not None else {**current, **changes}

        saga = Saga(f"cliente.editar.{tipo}")
        saga.add_step("admin.clientes", lambda: self.store.set(mirror, mirror_changes, merge=True))
        saga.add_step(
            "clientes",
            lambda: self.store.set(paths.clients().doc(cpf), changes, merge=True),
            required=False,
        )
        if new_email != old_email:
            index_record = {"cpf": cpf, "uid": uid, "nome": changes["nome"], "criadoEm": changes["atualizadoEm"]}
            for name, collection in (("admin.indices.emails", paths.admin_email_index()), ("indices.emails", paths.email_index())):
                saga.add_step(
                    name,
                    lambda collection=collection: self._move_index(collection, old_email, new_email, index_record),
                    required=False,
                )
        if tipo == "completa" and uid:
            saga.add_step(
                "identidade.conta",
                lambda: self.identity.update_account(
                    uid,
                    email=new_email if new_email != old_email else None,
                    display_name=changes["nome"],
                ),
                required=False,
            )
        report = saga.run()
        updated = self.store.get(paths.admin_clients().doc(cpf))
        result = updated.to_dict() if updated else {"id": cpf, **current, **changes}
        return result, report

    def _move_index(self, collection, old_email: str, new_email: str, record: dict) -> None:
        if old_email:
            self.store.delete(collection.doc(old_email))
        self.store.set(collection.doc(new_email), record)
