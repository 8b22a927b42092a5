from financeflow_categorizer.models import RuleDraft

# Seed rules, tuned on Nubank statement descriptions.
DEFAULT_RULES: tuple[RuleDraft, ...] = (
    # Transporte
    RuleDraft(name="Uber", keywords=["uber"], category="Transporte", applicable_type="expense", origin="system"),
    RuleDraft(name="99", keywords=["99app", "99taxi", "99 pop"], category="Transporte", applicable_type="expense", origin="system"),
    # Alimentação
    RuleDraft(name="iFood", keywords=["ifood", "via NuPay - iFood"], category="Alimentação", applicable_type="expense", origin="system"),
    RuleDraft(name="McDonald's", keywords=["mc donalds", "mcdonalds", "mcdonald"], category="Alimentação", applicable_type="expense", origin="system"),
    RuleDraft(name="Cafeterias", keywords=["cafe premium", "cafeteria"], category="Alimentação", applicable_type="expense", origin="system"),
    # Outros; registered before Supermercados so "mercado pago" is not taken for a market
    RuleDraft(name="PagSeguro", keywords=["pagseguro internet"], category="Outros", applicable_type="expense", origin="system"),
    RuleDraft(name="Mercado Pago", keywords=["mercado pago"], category="Outros", applicable_type="expense", origin="system"),
    # Supermercado
    RuleDraft(name="Supermercados", keywords=["superm", "supermercado", "mercado", "paulo bel"], category="Supermercado", applicable_type="expense", origin="system"),
    RuleDraft(name="Extra", keywords=["extra hiper", "extra supermercado"], category="Supermercado", applicable_type="expense", origin="system"),
    # Roupas
    RuleDraft(name="Lojas Renner", keywords=["lojas renner", "renner"], category="Roupas", applicable_type="expense", origin="system"),
    # Lazer
    RuleDraft(name="Sorveteria", keywords=["sorveteria", "acaiteria", "açaí"], category="Lazer", applicable_type="expense", origin="system"),
    # Cartão de Crédito
    RuleDraft(name="Mandacaru Cartões", keywords=["mandacaru administradora", "cartoes s/a"], category="Cartão de Crédito", applicable_type="expense", origin="system"),
    # Investimentos
    RuleDraft(name="RDB", keywords=["aplicação rdb", "resgate rdb"], category="Investimentos", applicable_type="both", origin="system"),
    # Transferências
    RuleDraft(name="Transferências Recebidas", keywords=["transferência recebida"], category="Transferências", applicable_type="income", origin="system"),
    RuleDraft(name="Transferências PIX", keywords=["transferência enviada", "enviada pelo pix"], category="Transferências", applicable_type="expense", origin="system"),
    # Reembolsos
    RuleDraft(name="Reembolsos", keywords=["reembolso recebido"], category="Reembolsos", applicable_type="income", origin="system"),
)
