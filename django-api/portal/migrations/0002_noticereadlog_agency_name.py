from django.db import migrations, models


def copy_current_agency_names(apps, schema_editor):
    NoticeReadLog = apps.get_model("portal", "NoticeReadLog")
    Agency = apps.get_model("portal", "Agency")
    names = {str(pk): name for pk, name in Agency.objects.values_list("id", "name")}
    for log in NoticeReadLog.objects.exclude(agency_ref=""):
        log.agency_name = names.get(log.agency_ref, "")
        log.save(update_fields=["agency_name"])


class Migration(migrations.Migration):

    dependencies = [
        ("portal", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="noticereadlog",
            name="agency_name",
            field=models.CharField(blank=True, default="", max_length=255),
        ),
        migrations.RunPython(copy_current_agency_names, migrations.RunPython.noop),
    ]
