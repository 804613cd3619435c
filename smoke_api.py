"""
Smoke test do Mobile Backend

Script simples para exercitar os endpoints contra um servidor em
execução (homologação TOTVS). Não faz parte da suíte pytest.

Uso:
    MOBILE_USER=jdoe MOBILE_PASSWORD=... python smoke_api.py
    python smoke_api.py health
"""

import asyncio
import os
import sys

import httpx
from rich.console import Console
from rich.panel import Panel

console = Console()

# Configuração
API_BASE_URL = os.environ.get("MOBILE_API_URL", "http://localhost:3333")
API_V1_URL = f"{API_BASE_URL}/v1"
API_KEY = os.environ.get("API_KEY", "dev-api-key-change-in-production")

USUARIO = os.environ.get("MOBILE_USER", "")
SENHA = os.environ.get("MOBILE_PASSWORD", "")

# Dados de exemplo (homologação)
EXEMPLO_ESTABEL = "2202"
EXEMPLO_ITEM = "3066865"


def _headers() -> dict[str, str]:
    headers = {"X-API-Key": API_KEY}
    if USUARIO:
        headers["X-User-Login"] = USUARIO
    return headers


async def check_health():
    """Testa health check."""
    console.print("🏥 [cyan]Health Check[/cyan]")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
            if response.status_code == 200:
                data = response.json()
                console.print(f"   ✓ Status: [green]{data.get('status')}[/green]")
                console.print(f"   ✓ TOTVS: {data.get('totvs_environment')}")
                return True
            console.print(f"   ✗ [red]HTTP {response.status_code}[/red]")
            return False
        except httpx.HTTPError as e:
            console.print(f"   ✗ [red]Erro: {e}[/red]")
            return False


async def check_login():
    """Testa login TOTVS."""
    console.print("🔐 [cyan]Login[/cyan]")

    if not USUARIO or not SENHA:
        console.print("   ⚠ [yellow]MOBILE_USER/MOBILE_PASSWORD não definidos[/yellow]")
        return False

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            response = await client.post(
                f"{API_V1_URL}/auth/login",
                json={"username": USUARIO, "password": SENHA},
                headers=_headers(),
            )
            if response.status_code == 200:
                data = response.json()
                console.print(f"   ✓ Login: {data.get('login')}")
                console.print(f"   ✓ Nome: {data.get('nome')}")
                return True
            if response.status_code == 401:
                console.print("   ✗ [red]Credenciais recusadas[/red]")
                return False
            console.print(f"   ✗ [red]HTTP {response.status_code}[/red]")
            return False
        except httpx.HTTPError as e:
            console.print(f"   ✗ [red]Erro: {e}[/red]")
            return False


async def check_item(it_codigo: str = EXEMPLO_ITEM):
    """Testa consulta de item."""
    console.print(f"📦 [cyan]Item[/cyan] ({it_codigo})")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            response = await client.get(
                f"{API_V1_URL}/fractioning/item",
                params={"it_codigo": it_codigo},
                headers=_headers(),
            )
            if response.status_code == 200:
                data = response.json()
                console.print(f"   ✓ Descrição: {data.get('desc_item')}")
                return True
            if response.status_code == 401:
                console.print("   ⚠ [yellow]Sessão expirada - faça login novamente[/yellow]")
                return False
            console.print(f"   ✗ [red]HTTP {response.status_code}[/red]")
            return False
        except httpx.HTTPError as e:
            console.print(f"   ✗ [red]Erro: {e}[/red]")
            return False


async def check_deposits(cod_estabel: str = EXEMPLO_ESTABEL):
    """Testa listagem de depósitos."""
    console.print(f"🏬 [cyan]Depósitos[/cyan] ({cod_estabel})")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            response = await client.get(
                f"{API_V1_URL}/fractioning/deposits",
                params={"cod_estabel": cod_estabel},
                headers=_headers(),
            )
            if response.status_code == 200:
                data = response.json()
                console.print(f"   ✓ {len(data)} depósitos")
                return True
            console.print(f"   ✗ [red]HTTP {response.status_code}[/red]")
            return False
        except httpx.HTTPError as e:
            console.print(f"   ✗ [red]Erro: {e}[/red]")
            return False


async def run_all_checks():
    """Executa todas as verificações."""
    console.print(Panel.fit(
        "[bold cyan]🧪 Smoke Test - Mobile Backend[/bold cyan]\n"
        f"Base URL: [yellow]{API_BASE_URL}[/yellow]",
        border_style="cyan"
    ))
    console.print()

    results = {
        "health": await check_health(),
        "login": await check_login(),
    }

    console.print()

    if not results["login"]:
        console.print("[yellow]⚠️  Sem login - consultas TOTVS serão puladas[/yellow]")
    else:
        results["item"] = await check_item()
        console.print()

        results["deposits"] = await check_deposits()

    console.print()

    passed = sum(1 for v in results.values() if v)
    total = len(results)

    if passed == total:
        console.print(f"[bold green]✓ Todas as verificações passaram ({passed}/{total})[/bold green]")
        return 0

    console.print(f"[bold yellow]⚠ {passed}/{total} verificações passaram[/bold yellow]")
    return 1


async def run_single_check(name: str):
    """Executa uma verificação específica."""
    checks = {
        "health": check_health,
        "login": check_login,
        "item": check_item,
        "deposits": check_deposits,
    }

    if name not in checks:
        console.print(f"[red]Verificação desconhecida: {name}[/red]")
        console.print(f"Disponíveis: {', '.join(checks.keys())}")
        return 1

    result = await checks[name]()
    return 0 if result else 1


async def main():
    """Função principal."""
    if len(sys.argv) > 1:
        return await run_single_check(sys.argv[1])
    return await run_all_checks()


if __name__ == "__main__":
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        console.print("\n[cyan]Interrompido pelo usuário[/cyan]")
        sys.exit(130)
