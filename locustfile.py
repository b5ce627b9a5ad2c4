from locust import HttpUser, task, between
import random
import uuid


def short_id(prefix):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class ReviewWorkflowUser(HttpUser):
    """Команда из пяти человек создаёт, переназначает и мёржит PR"""
    wait_time = between(0.5, 2.0)
    weight = 4

    def on_start(self):
        self.team_name = short_id("team")
        self.members = [short_id("u") for _ in range(5)]
        self.open_prs = []

        self.client.post("/team/add", json={
            "team_name": self.team_name,
            "members": [{"user_id": uid, "username": uid.upper(), "is_active": True} for uid in self.members]
        })
        for _ in range(3):
            self.open_pr()

    @task(3)
    def open_pr(self):
        pr_id = short_id("pr")
        with self.client.post("/pullRequest/create", json={
            "pull_request_id": pr_id,
            "pull_request_name": f"Change {pr_id}",
            "author_id": random.choice(self.members)
        }, name="/pullRequest/create", catch_response=True) as response:
            if response.status_code == 201:
                self.open_prs.append(pr_id)
                response.success()

    @task(2)
    def reassign(self):
        if not self.open_prs:
            return
        pr_id = random.choice(self.open_prs)
        pr = self.client.get("/pullRequest/get", params={"pull_request_id": pr_id},
                             name="/pullRequest/get").json().get("pr")
        if not pr or not pr["assigned_reviewers"]:
            return
        # NO_CANDIDATE и PR_MERGED под нагрузкой не считаем ошибкой
        with self.client.post("/pullRequest/reassign", json={
            "pull_request_id": pr_id,
            "old_reviewer_id": random.choice(pr["assigned_reviewers"])
        }, catch_response=True) as response:
            if response.status_code in (200, 409):
                response.success()

    @task(1)
    def merge(self):
        if self.open_prs:
            pr_id = self.open_prs.pop(random.randrange(len(self.open_prs)))
            self.client.post("/pullRequest/merge", json={"pull_request_id": pr_id})

    @task(1)
    def toggle_member(self):
        self.client.post("/users/setIsActive", json={
            "user_id": random.choice(self.members),
            "is_active": random.random() < 0.7
        })

    @task(1)
    def rotate_team(self):
        """Редкая массовая деактивация с возвратом участников"""
        if random.random() > 0.1:
            return
        self.client.post("/users/deactivateByTeam", json={"team_name": self.team_name})
        for uid in self.members:
            self.client.post("/users/setIsActive", json={"user_id": uid, "is_active": True})


class DashboardUser(HttpUser):
    """Только чтение: команды, очереди ревью и статистика"""
    wait_time = between(1.0, 3.0)
    weight = 1

    stats_paths = [
        "/stats/prs-total",
        "/stats/prs-status",
        "/stats/assignments-per-user",
        "/stats/top-reviewers",
        "/stats/avg-close-time",
        "/stats/idle-users-per-team",
        "/stats/needy-prs-per-team",
    ]

    @task(3)
    def stats(self):
        self.client.get(random.choice(self.stats_paths))

    @task(1)
    def health(self):
        self.client.get("/health")

    @task(1)
    def review_queue(self):
        top = self.client.get("/stats/top-reviewers").json().get("top_reviewers", [])
        if top:
            user_id = random.choice(top)["user_id"]
            self.client.get("/users/getReview", params={"user_id": user_id}, name="/users/getReview")
