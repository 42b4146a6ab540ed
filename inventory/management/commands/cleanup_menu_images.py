from django.core.management.base import BaseCommand, CommandError

from authentication.context import RequestContext
from inventory.exceptions import MenuError
from inventory.services import cleanup_missing_images, find_missing_images


class Command(BaseCommand):
    help = "Clear image references of menu items whose file is missing from the upload directory"

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help="Only list the missing images")
        parser.add_argument('--database', default='default')

    def handle(self, *args, **options):
        using = options['database']
        if options['dry_run']:
            missing = find_missing_images(using=using)
            for item_id, name in missing:
                self.stdout.write(f"item {item_id}: {name}")
            self.stdout.write(f"{len(missing)} missing image(s)")
            return

        try:
            cleaned = cleanup_missing_images(RequestContext.system(using=using))
        except MenuError as e:
            raise CommandError(e.message)
        self.stdout.write(self.style.SUCCESS(f"Cleaned {cleaned} missing image reference(s)"))
