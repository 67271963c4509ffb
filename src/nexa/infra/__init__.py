"""Adaptadores de plataforma (memória e Supabase)."""
