import uuid

from django.db import models


class AnalysisRecord(models.Model):
    """A saved comment analysis, listed in the history panel"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    video_id = models.CharField(max_length=20, help_text="YouTube video ID (e.g., 'dQw4w9WgXcQ')")
    video_title = models.CharField(max_length=500)
    video_channel = models.CharField(max_length=200, blank=True)
    video_url = models.URLField(max_length=500, blank=True)

    model_used = models.CharField(max_length=200, blank=True, help_text="Model that produced the analysis")
    total_comments = models.PositiveIntegerField(default=0)
    analysis = models.JSONField(help_text="Assembled analysis result")
    tokens_used = models.JSONField(null=True, blank=True, help_text="Input/output token counts")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_at'], name='insights_an_created_2f1c3e_idx'),
            models.Index(fields=['video_id'], name='insights_an_video_i_8d4b7a_idx'),
        ]

    def __str__(self):
        return f"{self.video_title} ({self.video_id}) - {self.created_at:%Y-%m-%d %H:%M}"

    def to_summary(self):
        """Fields shown in the history list"""
        return {
            'id': str(self.id),
            'createdAt': self.created_at.isoformat(),
            'videoTitle': self.video_title,
            'videoChannel': self.video_channel,
            'modelUsed': self.model_used,
            'totalComments': self.total_comments,
        }

    def to_dict(self):
        """Full record in the public API shape"""
        return {
            **self.to_summary(),
            'videoId': self.video_id,
            'videoUrl': self.video_url,
            'analysis': self.analysis,
            'tokensUsed': self.tokens_used,
        }
