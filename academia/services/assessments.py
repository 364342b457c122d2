from datetime import date
from typing import Optional

from academia.core.clock import now_iso
from academia.core.errors import NotFoundError, ValidationError
from academia.finance.dates import parse_iso_date
from academia.services.clients import clean_cpf
from academia.store import paths
from academia.store.base import DocumentStore

SKINFOLDS = ("triceps", "subescapular", "biceps", "axilarMedia", "suprailiaca", "abdominal", "coxa")
GIRTHS = (
    "torax",
    "cintura",
    "quadril",
    "abdomen",
    "bracoDireito",
    "bracoEsquerdo",
    "coxaDireita",
    "coxaEsquerda",
    "panturrilhaDireita",
    "panturrilhaEsquerda",
)
SEXES = ("masculino", "feminino")


def age_on(birth: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return years


def body_fat_percentage(sex: str, age: int, skinfold_sum: float) -> float:
    # Jackson & Pollock 7 skinfolds, density converted with Siri's equation.
    if sex == "masculino":
        density = 1.112 - 0.00043499 * skinfold_sum + 0.00000055 * skinfold_sum**2 - 0.00028826 * age
    else:
        density = 1.097 - 0.00046971 * skinfold_sum + 0.00000056 * skinfold_sum**2 - 0.00012828 * age
    return round(max(0.0, (4.95 / density - 4.5) * 100), 1)


def compute_results(weight: float, height_cm: float, sex: str, age: int, skinfold_sum: float) -> dict:
    height_m = height_cm / 100
    fat = body_fat_percentage(sex, age, skinfold_sum)
    fat_mass = round(weight * fat / 100, 1)
    return {
        "imc": round(weight / (height_m * height_m), 1),
        "percentualGordura": fat,
        "massaGorda": fat_mass,
        "massaMagra": round(weight - fat_mass, 1),
    }


class AssessmentService:
    """Body-composition assessments, stored per client CPF."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _client_age(self, cpf: str) -> Optional[int]:
        client = self.store.get(paths.admin_clients().doc(cpf)) or self.store.get(paths.clients().doc(cpf))
        birth = parse_iso_date(client.data.get("dataNascimento")) if client else None
        return age_on(birth) if birth else None

    def create(self, cpf: str, data: dict) -> dict:
        cpf = clean_cpf(cpf)
        peso = data.get("peso")
        altura = data.get("altura")
        if not isinstance(peso, (int, float)) or peso <= 0:
            raise ValidationError("Peso e obrigatorio e deve ser maior que 0.")
        if not isinstance(altura, (int, float)) or altura <= 0:
            raise ValidationError("Altura e obrigatoria e deve ser maior que 0.")
        sexo = data.get("sexo")
        if sexo not in SEXES:
            raise ValidationError('Sexo deve ser "masculino" ou "feminino".')
        dobras_in = data.get("dobras") or {}
        try:
            dobras = {name: float(dobras_in[name]) for name in SKINFOLDS}
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError("Todas as dobras cutaneas sao obrigatorias.") from exc
        dobras["soma"] = round(sum(dobras.values()), 1)
        medidas_in = data.get("medidas") or {}
        medidas = {name: medidas_in.get(name) or None for name in GIRTHS}

        resultados = data.get("resultados")
        if not resultados:
            age = data.get("idade") if isinstance(data.get("idade"), int) else self._client_age(cpf)
            if age is None:
                raise ValidationError("Idade do cliente e necessaria para calcular os resultados.")
            resultados = compute_results(peso, altura, sexo, age, dobras["soma"])
        else:
            resultados = {key: resultados.get(key) for key in ("imc", "percentualGordura", "massaGorda", "massaMagra")}

        stamp = now_iso()
        record = {
            "cpf": cpf,
            "peso": peso,
            "altura": altura,
            "sexo": sexo,
            "dobras": dobras,
            "medidas": medidas,
            "resultados": resultados,
            "observacoes": data.get("observacoes") or "",
            "criadoEm": stamp,
            "atualizadoEm": stamp,
        }
        path = self.store.add(paths.assessments(cpf), record)
        return {"avaliacaoId": path.id, "clienteCpf": cpf, "resultados": resultados, "criadoEm": stamp}

    def list(self, cpf: str) -> dict:
        cpf = clean_cpf(cpf)
        docs = self.store.query(paths.assessments(cpf), order_by=("atualizadoEm", "desc"))
        avaliacoes = [doc.to_dict() for doc in docs]
        return {
            "avaliacoes": avaliacoes,
            "total": len(avaliacoes),
            "ultimaAvaliacao": avaliacoes[0] if avaliacoes else None,
        }

    def delete(self, cpf: str, assessment_id: str) -> dict:
        cpf = clean_cpf(cpf)
        path = paths.assessments(cpf).doc(assessment_id)
        if self.store.get(path) is None:
            raise NotFoundError("Avaliacao nao encontrada.")
        self.store.delete(path)
        return {"cpf": cpf, "avaliacaoId": assessment_id, "deletadoEm": now_iso()}
