"""
SCHEDULER DE JOBS PERIÓDICOS
=============================

Gerencia a execução da sincronização agendada.

JOBS CONFIGURADOS:
- Sincronização do feed: a cada SYNC_INTERVAL_MINUTES (0 = desligado)

TECNOLOGIA: APScheduler (AsyncIOScheduler)
"""

import logging
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

SYNC_JOB_ID = "sync_listings_job"

# Instância global do scheduler
scheduler: Optional[AsyncIOScheduler] = None


def create_scheduler(
    sync_job: Callable[[], Awaitable[object]],
    interval_minutes: int,
) -> AsyncIOScheduler:
    """
    Cria e configura o scheduler.

    CHAMADO POR: lifespan da API no startup
    """
    global scheduler

    if scheduler is not None:
        logger.warning("⚠️ Scheduler já existe, retornando instância existente")
        return scheduler

    logger.info("🔧 Criando scheduler...")

    scheduler = AsyncIOScheduler(
        timezone="America/Sao_Paulo",
        job_defaults={
            "coalesce": True,  # Agrupa execuções perdidas
            "max_instances": 1,  # Só uma rodada por vez
            "misfire_grace_time": 60 * 5,
        }
    )

    scheduler.add_job(
        sync_job,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id=SYNC_JOB_ID,
        name="Sincronização do feed de imóveis",
        replace_existing=True,
    )

    logger.info(f"📅 Job registrado: sincronização a cada {interval_minutes} min")

    return scheduler


def start_scheduler():
    """
    Inicia o scheduler.

    CHAMADO POR: lifespan da API (depois de create_scheduler)
    """
    global scheduler

    if scheduler is None:
        logger.error("❌ Scheduler não foi criado. Chame create_scheduler() primeiro.")
        return

    if scheduler.running:
        logger.warning("⚠️ Scheduler já está rodando")
        return

    scheduler.start()
    logger.info("🚀 Scheduler iniciado!")

    for job in scheduler.get_jobs():
        logger.info(f"   - {job.name} (próxima execução: {job.next_run_time})")


def stop_scheduler():
    """
    Para e descarta o scheduler.

    CHAMADO POR: lifespan da API no shutdown
    """
    global scheduler

    if scheduler is None:
        return

    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("🛑 Scheduler parado")

    scheduler = None


def get_scheduler_status() -> dict:
    """
    Retorna status do scheduler.

    Usado pelo health check.
    """
    if scheduler is None:
        return {
            "running": False,
            "jobs": [],
        }

    jobs_info = []
    for job in scheduler.get_jobs():
        jobs_info.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None,
        })

    return {
        "running": scheduler.running,
        "jobs": jobs_info,
    }
