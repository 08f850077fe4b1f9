from django.core.management.base import BaseCommand
from orders.models import Order
from orders.workflow import generate_access_token


class Command(BaseCommand):
    help = 'Generate access tokens for orders that do not have one'

    def handle(self, *args, **options):
        orders = Order.objects.filter(access_token='')
        self.stdout.write(f'Found {orders.count()} orders without access token')

        updated = 0
        for order in orders.iterator():
            order.access_token = generate_access_token()
            order.save(update_fields=['access_token'])
            updated += 1
            self.stdout.write(f'Updated order #{order.order_number} of store {order.store_id}')

        self.stdout.write(self.style.SUCCESS(f'Generated {updated} access tokens'))
