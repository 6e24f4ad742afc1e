"""
공통 추상 모델

TimeStampedModel : created_at / updated_at 자동 기록
SoftDeleteModel  : is_active 플래그 기반 삭제 (거래, 예산)

    tx.soft_delete()          # 목록/합계에서 빠짐
    Transaction.active.all()  # 살아있는 행만
    Transaction.objects.all() # 삭제된 행 포함 (관리자, 예산 복구)
    tx.restore()
"""
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteManager(models.Manager):
    """is_active=True 인 행만"""

    def get_queryset(self):
        return super().get_queryset().filter(is_active=True)


class SoftDeleteModel(TimeStampedModel):
    """
    소프트 삭제 추상 모델

    하위 모델은 active 매니저를 자기 QuerySet 헬퍼가 붙은 것으로 바꿔 써도 되지만
    반드시 is_active=True 필터는 유지해야 함
    """
    is_active = models.BooleanField(default=True, db_index=True, verbose_name='active')

    objects = models.Manager()
    active = SoftDeleteManager()

    class Meta:
        abstract = True

    def soft_delete(self):
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])

    def restore(self):
        self.is_active = True
        self.save(update_fields=['is_active', 'updated_at'])
