# nexo_clinic/utils/off_api.py

import logging

import requests

OFF_SEARCH_URL = 'https://world.openfoodfacts.org/cgi/search.pl'

logger = logging.getLogger(__name__)


def _f(x, d=0.0) -> float:
    try:
        return float(x) if x not in (None, "") else float(d)
    except (TypeError, ValueError):
        return float(d)


def search_off(name: str, limit: int = 5, timeout: float = 5):
    """
    Busca hasta `limit` productos en OpenFoodFacts cuyo nombre contenga `name`.
    Devuelve dicts con forma de FoodItem (por 100 g); ante error, lista vacía.
    """
    params = {
        'search_terms':  name,
        'search_simple': 1,
        'action':        'process',
        'json':          1,
        'page_size':     min(max(limit, 1), 20),
        'fields':        'code,product_name,product_name_es,nutriments',
    }
    try:
        r = requests.get(OFF_SEARCH_URL, params=params, timeout=timeout)
        r.raise_for_status()
        prods = (r.json() or {}).get('products', [])
    except (requests.RequestException, ValueError) as e:
        logger.warning("[off_api] OFF error: %s", e)
        return []

    results = []
    for p in prods:
        nm = (p.get('product_name_es') or p.get('product_name') or '').strip()
        nutr = p.get('nutriments', {}) or {}
        kcal = nutr.get('energy-kcal_100g')
        # Si solo viene energy_100g (kJ), lo convertimos a kcal aprox.
        if kcal in (None, '', 0) and 'energy_100g' in nutr:
            kcal = _f(nutr['energy_100g']) / 4.184
        if not nm or kcal in (None, ''):
            continue
        results.append({
            'id': f"off-{p.get('code') or ''}",
            'name': nm,
            'kcal': round(_f(kcal), 1),
            'p': _f(nutr.get('proteins_100g')),
            'c': _f(nutr.get('carbohydrates_100g')),
            'f': _f(nutr.get('fat_100g')),
            'source': 'openfoodfacts',
        })
    return results[:limit]
