"""Camada de dados do painel Nexa: sincronização de coleções com a plataforma hospedada."""
