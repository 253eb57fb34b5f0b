"""
Celery configuration for the Mini ATS project.

Tasks are auto-discovered from the installed apps. Email delivery runs on its
own queue so a slow mail transport never delays other work.
"""

import os

from celery import Celery
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'miniats.settings')

app = Celery('miniats')

# namespace='CELERY' means all celery-related configuration keys
# should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()

default_exchange = Exchange('default', type='direct')
emails_exchange = Exchange('emails', type='direct')

app.conf.task_queues = (
    Queue('default', default_exchange, routing_key='default'),
    Queue('emails', emails_exchange, routing_key='emails'),
)

app.conf.task_default_queue = 'default'
app.conf.task_default_exchange = 'default'
app.conf.task_default_routing_key = 'default'

app.conf.task_routes = {
    'notifications.tasks.*': {'queue': 'emails'},
}
