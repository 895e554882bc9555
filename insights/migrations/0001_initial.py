import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AnalysisRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('video_id', models.CharField(help_text="YouTube video ID (e.g., 'dQw4w9WgXcQ')", max_length=20)),
                ('video_title', models.CharField(max_length=500)),
                ('video_channel', models.CharField(blank=True, max_length=200)),
                ('video_url', models.URLField(blank=True, max_length=500)),
                ('model_used', models.CharField(blank=True, help_text='Model that produced the analysis', max_length=200)),
                ('total_comments', models.PositiveIntegerField(default=0)),
                ('analysis', models.JSONField(help_text='Assembled analysis result')),
                ('tokens_used', models.JSONField(blank=True, help_text='Input/output token counts', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='insights_an_created_2f1c3e_idx'),
                    models.Index(fields=['video_id'], name='insights_an_video_i_8d4b7a_idx'),
                ],
            },
        ),
    ]
