# nexo_clinic/utils/calculos.py

from datetime import date

FORMULAS = ("mifflin", "harris")

_GENDER_ALIASES = {
    "M": "M", "H": "M", "HOMBRE": "M", "MALE": "M", "MASCULINO": "M",
    "F": "F", "MUJER": "F", "FEMALE": "F", "FEMENINO": "F",
}


def normalizar_sexo(sexo) -> str:
    """
    Devuelve 'M' o 'F'. Acepta 'M'/'F', 'Hombre'/'Mujer', 'male'/'female'.
    """
    s = (sexo or "").strip().upper()
    if s not in _GENDER_ALIASES:
        raise ValueError("Sexo inválido: use 'M' o 'F'.")
    return _GENDER_ALIASES[s]


def calcular_edad(fecha_nacimiento):
    """
    Devuelve la edad actual en años dados fecha_nacimiento (datetime.date).
    """
    hoy = date.today()
    # Si aún no ha cumplido este año, resta 1
    return (
        hoy.year
        - fecha_nacimiento.year
        - ((hoy.month, hoy.day) < (fecha_nacimiento.month, fecha_nacimiento.day))
    )


def calcular_bmr(formula, sexo=None, peso=None, altura=None, edad=None):
    """
    Dispatcher de BMR que elige la fórmula:

    - "mifflin": Mifflin–St Jeor
    - "harris": Harris–Benedict (revisión de Roza y Shizgal)

    Ambas requieren sexo ('M'/'F'), peso (kg), altura (cm) y edad (años).
    """
    key = (formula or "").strip().lower()
    if key not in FORMULAS:
        raise ValueError(f"Fórmula BMR desconocida: {formula!r}")

    if sexo is None or peso is None or altura is None or edad is None:
        raise ValueError(
            "Faltan parámetros para el BMR: sexo, peso, altura y edad son requeridos."
        )
    s = normalizar_sexo(sexo)

    if key == "mifflin":
        ajuste = 5 if s == "M" else -161
        return 10 * peso + 6.25 * altura - 5 * edad + ajuste

    if s == "M":
        return 66.5 + 13.75 * peso + 5.003 * altura - 6.75 * edad
    return 655.1 + 9.563 * peso + 1.850 * altura - 4.676 * edad


def calcular_tdee(bmr, factor_actividad):
    """
    Calcula el gasto energético diario total (TDEE) multiplicando
    la BMR por el factor de actividad (float).
    """
    if bmr is None or factor_actividad is None:
        raise ValueError("BMR y factor de actividad son requeridos para TDEE.")
    return bmr * factor_actividad


def calcular_kcal(proteinas, carbohidratos, grasas):
    """
    Calcula las kcal totales a partir de gramos de macronutrientes:
      4 kcal/g de proteínas
      4 kcal/g de carbohidratos
      9 kcal/g de grasas
    """
    return (proteinas * 4) + (carbohidratos * 4) + (grasas * 9)


def bmr_mifflin_st_jeor(sexo, peso, altura, edad):
    """
    Alias para Mifflin–St Jeor, útil en tests directos.
    """
    return calcular_bmr("mifflin", sexo=sexo, peso=peso, altura=altura, edad=edad)


def bmr_harris_benedict(sexo, peso, altura, edad):
    """
    Alias para Harris–Benedict, útil en tests directos.
    """
    return calcular_bmr("harris", sexo=sexo, peso=peso, altura=altura, edad=edad)
